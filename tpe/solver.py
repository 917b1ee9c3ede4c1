from __future__ import annotations

from collections.abc import Collection
from collections.abc import Mapping
import itertools
import math
from typing import Any
from typing import NamedTuple
import warnings

from tpe._lazy_random_state import LazyRandomState
from tpe._optimizer import TpeOptimizer
from tpe.distributions import BaseDistribution
from tpe.exceptions import ExperimentalWarning
from tpe.exceptions import NanValueError
from tpe.logging import get_logger


_logger = get_logger(__name__)


class SolverTrial(NamedTuple):
    trial_id: int
    params: dict[str, Any]


class TPESolver:
    """Solver of a multi-parameter search space composed of single-parameter TPE optimizers.

    Each parameter gets its own :class:`~tpe.TpeOptimizer` whose estimator and range are chosen
    from the parameter's distribution. Every optimizer is told the same objective value, so the
    parameters are modeled independently.

    Example:

        .. code::

            import tpe
            from tpe.distributions import CategoricalDistribution
            from tpe.distributions import FloatDistribution

            solver = tpe.TPESolver(
                {"x": FloatDistribution(-5.0, 5.0), "y": CategoricalDistribution([1, 10, 100])},
                seed=0,
            )
            for _ in range(100):
                trial = solver.ask()
                solver.tell(trial.trial_id, trial.params["x"] ** 2 + trial.params["y"])

    Args:
        search_space:
            A mapping from parameter names to their distributions.
        seed:
            Seed for the random number generator shared by all optimizers.
        gamma:
            Passed to every :class:`~tpe.TpeOptimizer`.
        n_candidates:
            Passed to every :class:`~tpe.TpeOptimizer`.
        n_startup_trials:
            Parameters are sampled uniformly at random until this number of trials are told.
    """

    def __init__(
        self,
        search_space: Mapping[str, BaseDistribution],
        *,
        seed: int | None = None,
        gamma: float = 0.1,
        n_candidates: int = 24,
        n_startup_trials: int = 0,
    ) -> None:
        if len(search_space) == 0:
            raise ValueError("search_space must contain at least one parameter.")
        if n_startup_trials < 0:
            raise ValueError(
                f"n_startup_trials must be non-negative, but got {n_startup_trials}."
            )

        warnings.warn(
            "``TPESolver`` is an experimental feature. The interface can change in the future.",
            ExperimentalWarning,
        )

        self._search_space = dict(search_space)
        # Parameters with a single value are fixed and need no optimizer.
        self._fixed_params = {
            name: dist.param_range().start
            for name, dist in self._search_space.items()
            if dist.single()
        }
        self._optimizers = {
            name: TpeOptimizer(
                dist.estimator_builder(),
                dist.param_range(),
                gamma=gamma,
                n_candidates=n_candidates,
            )
            for name, dist in self._search_space.items()
            if not dist.single()
        }
        self._n_startup_trials = n_startup_trials
        self._rng = LazyRandomState(seed)
        self._trial_ids = itertools.count()
        # Internal params of the trials asked but not told yet.
        self._evaluating: dict[int, dict[str, float]] = {}
        self._best: tuple[float, dict[str, Any]] | None = None
        self._n_told = 0

    @property
    def search_space(self) -> dict[str, BaseDistribution]:
        return dict(self._search_space)

    @property
    def n_told_trials(self) -> int:
        return self._n_told

    @property
    def best_value(self) -> float:
        if self._best is None:
            raise ValueError("No trials are told yet.")
        return self._best[0]

    @property
    def best_params(self) -> dict[str, Any]:
        if self._best is None:
            raise ValueError("No trials are told yet.")
        return dict(self._best[1])

    def reseed_rng(self) -> None:
        self._rng.rng.seed()

    def ask(self) -> SolverTrial:
        """Return a new trial with the parameters to be evaluated next."""
        rng = self._rng.rng
        trial_id = next(self._trial_ids)
        if self._n_told < self._n_startup_trials:
            _logger.debug(
                f"Trial#{trial_id} is sampled randomly because only {self._n_told} trials are "
                f"told (n_startup_trials={self._n_startup_trials})."
            )
            internal_params = {
                name: dist.sample_uniform(rng)
                for name, dist in self._search_space.items()
                if name in self._optimizers
            }
        else:
            internal_params = {name: opt.ask(rng) for name, opt in self._optimizers.items()}
        internal_params.update(self._fixed_params)

        self._evaluating[trial_id] = internal_params
        return SolverTrial(
            trial_id=trial_id,
            params={
                name: dist.to_external_repr(internal_params[name])
                for name, dist in self._search_space.items()
            },
        )

    def tell(self, trial_id: int, value: float, unused_params: Collection[str] = ()) -> None:
        """Tell the objective value of an asked trial.

        Args:
            trial_id:
                The id of a trial returned by :meth:`ask`.
            value:
                The objective value. Lower is better.
            unused_params:
                Names of the parameters not used in the evaluation. They are told as missing.

        Raises:
            KeyError:
                If ``trial_id`` is unknown or already told.
            :exc:`~tpe.exceptions.NanValueError`:
                If ``value`` is NaN. The trial stays pending.
        """
        if trial_id not in self._evaluating:
            raise KeyError(f"Trial#{trial_id} is unknown or already told.")
        unknown = set(unused_params) - set(self._search_space)
        if unknown:
            raise ValueError(f"Unknown parameters in unused_params: {sorted(unknown)}.")

        internal_params = self._evaluating[trial_id]
        # Checked up front so that no optimizer is told a partial trial.
        if math.isnan(value):
            raise NanValueError(None, value)

        for name, opt in self._optimizers.items():
            opt.tell(math.nan if name in unused_params else internal_params[name], value)

        del self._evaluating[trial_id]
        self._n_told += 1
        if self._best is None or value < self._best[0]:
            params = {
                name: self._search_space[name].to_external_repr(v)
                for name, v in internal_params.items()
                if name not in unused_params
            }
            self._best = (value, params)
