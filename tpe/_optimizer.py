from __future__ import annotations

import math
from typing import NamedTuple
from typing import Optional

import numpy as np

from tpe._range import Range
from tpe.density_estimation import DensityEstimatorBuilder
from tpe.density_estimation import HistogramEstimatorBuilder
from tpe.exceptions import GammaOutOfRangeError
from tpe.exceptions import HistogramRangeError
from tpe.exceptions import InvalidBinError
from tpe.exceptions import NanValueError
from tpe.exceptions import ParamOutOfRangeError
from tpe.exceptions import ZeroCandidatesError
from tpe.logging import get_logger


_logger = get_logger(__name__)


class _Trial(NamedTuple):
    # None means the parameter was not used in the evaluation.
    param: Optional[float]
    value: float


class TpeOptimizer:
    """Optimizer of a single parameter using TPE (Tree-structured Parzen Estimator).

    On each :meth:`ask`, the told trials are split by objective value into the best ``gamma``
    fraction and the rest. One density estimator ``l(x)`` is fitted to the parameter values of
    the former and another ``g(x)`` to those of the latter. ``n_candidates`` values are sampled
    from ``l(x)`` and the one maximizing ``log l(x) - log g(x)`` is returned.

    The optimizer minimizes the told values. Negate the objective to maximize it.

    Note that an instance handles exactly one parameter. To optimize several parameters
    simultaneously, create one optimizer per parameter and tell each of them the same value
    (see :class:`~tpe.solver.TPESolver`).

    For further information about TPE algorithm, please refer to the following papers:

    - `Algorithms for Hyper-Parameter Optimization
      <https://papers.nips.cc/paper/4443-algorithms-for-hyper-parameter-optimization.pdf>`_
    - `Making a Science of Model Search: Hyperparameter Optimization in Hundreds of
      Dimensions for Vision Architectures <http://proceedings.mlr.press/v28/bergstra13.pdf>`_

    Example:

        .. code::

            import numpy as np
            import tpe

            optimizer = tpe.TpeOptimizer(tpe.parzen_estimator(), tpe.range(-5.0, 5.0))
            rng = np.random.RandomState(0)
            for _ in range(100):
                x = optimizer.ask(rng)
                optimizer.tell(x, x**2)

    Args:
        estimator_builder:
            Builder of the density estimators, e.g., :func:`~tpe.parzen_estimator` for
            numerical parameters and :func:`~tpe.histogram_estimator` for categorical ones.
        param_range:
            The range of the parameter.
        gamma:
            The fraction of the trials regarded as superior. Must be in ``[0, 1]``.
        n_candidates:
            The number of candidates sampled on each :meth:`ask`. Must be positive.

    Raises:
        :exc:`~tpe.exceptions.GammaOutOfRangeError`:
            If ``gamma`` is not in ``[0, 1]``.
        :exc:`~tpe.exceptions.ZeroCandidatesError`:
            If ``n_candidates`` is not positive.
        :exc:`~tpe.exceptions.HistogramRangeError`:
            If a histogram estimator is given a range not starting at 0.
    """

    def __init__(
        self,
        estimator_builder: DensityEstimatorBuilder,
        param_range: Range,
        *,
        gamma: float = 0.1,
        n_candidates: int = 24,
    ) -> None:
        if not 0.0 <= gamma <= 1.0:
            raise GammaOutOfRangeError(gamma)
        if n_candidates < 1:
            raise ZeroCandidatesError(n_candidates)
        # Histogram bins are the integers 0, 1, ..., so asked values are only valid from 0.
        self._tells_bins = isinstance(estimator_builder, HistogramEstimatorBuilder)
        if self._tells_bins and param_range.start != 0:
            raise HistogramRangeError(param_range)

        self._estimator_builder = estimator_builder
        self._param_range = param_range
        self._gamma = gamma
        self._n_candidates = n_candidates
        self._trials: list[_Trial] = []
        self._sorted_trials: list[_Trial] | None = None

    @property
    def param_range(self) -> Range:
        return self._param_range

    @property
    def gamma(self) -> float:
        return self._gamma

    @property
    def n_candidates(self) -> int:
        return self._n_candidates

    @property
    def n_trials(self) -> int:
        return len(self._trials)

    @property
    def trials(self) -> list[tuple[float, float]]:
        """Told ``(param, value)`` pairs in insertion order. Unused params are NaN."""
        return [(math.nan if t.param is None else t.param, t.value) for t in self._trials]

    def __len__(self) -> int:
        return len(self._trials)

    def ask(self, rng: np.random.RandomState) -> float:
        """Return the next value of the parameter to be evaluated.

        Before the first ask, it might be worth telling some randomly sampled observations to
        reduce the bias due to too few trials.

        Args:
            rng:
                The random number generator. It is advanced by this call.

        Returns:
            A value in :attr:`param_range`. For the histogram estimator, a bin index.
        """
        if self._sorted_trials is None:
            # sorted is stable, so ties keep their insertion order.
            self._sorted_trials = sorted(self._trials, key=lambda t: t.value)

        split_point = self._decide_split_point()
        superiors = self._sorted_trials[:split_point]
        inferiors = self._sorted_trials[split_point:]
        _logger.debug(
            f"Split {len(self._sorted_trials)} trials into {len(superiors)} superior and "
            f"{len(inferiors)} inferior ones."
        )

        superior_estimator = self._estimator_builder.build(
            (t.param for t in superiors if t.param is not None), self._param_range
        )
        inferior_estimator = self._estimator_builder.build(
            (t.param for t in inferiors if t.param is not None), self._param_range
        )

        candidates = superior_estimator.sample(rng, self._n_candidates)
        scores = superior_estimator.log_pdf(candidates) - inferior_estimator.log_pdf(candidates)
        return _select_candidate(candidates, scores)

    def tell(self, param: float | None, value: float) -> None:
        """Tell the evaluation result of a parameter value to the optimizer.

        Args:
            param:
                The evaluated parameter value. Use NaN (or :obj:`None`) if the parameter was not
                used in the evaluation, which happens when the search space is conditional.
            value:
                The objective value. Lower is better.

        Raises:
            :exc:`~tpe.exceptions.NanValueError`:
                If ``value`` is NaN.
            :exc:`~tpe.exceptions.ParamOutOfRangeError`:
                If ``param`` is neither NaN nor in :attr:`param_range`.
            :exc:`~tpe.exceptions.InvalidBinError`:
                If the estimator is a histogram and ``param`` is not an integer.
        """
        if math.isnan(value):
            raise NanValueError(param, value)

        if param is not None and math.isnan(param):
            param = None
        if param is not None and not self._param_range.contains(param):
            raise ParamOutOfRangeError(param, self._param_range)
        if param is not None and self._tells_bins and not float(param).is_integer():
            raise InvalidBinError(param)

        self._trials.append(_Trial(param=None if param is None else float(param), value=value))
        self._sorted_trials = None

    def _decide_split_point(self) -> int:
        return int(math.ceil(self._gamma * len(self._trials)))


def _select_candidate(candidates: np.ndarray, scores: np.ndarray) -> float:
    if candidates.size == 0:
        raise ValueError(f"The size of `candidates` must be positive, but got {candidates.size}.")

    if candidates.size != scores.size:
        raise ValueError(
            "The sizes of `candidates` and `scores` must be same, but got "
            f"(candidates.size, scores.size) = ({candidates.size}, {scores.size})."
        )

    # The last maximum wins on ties.
    best_idx = scores.size - 1 - np.argmax(scores[::-1])
    return candidates[best_idx].item()
