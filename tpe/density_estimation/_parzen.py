from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

import numpy as np

from tpe._range import Range
from tpe.density_estimation import _truncnorm
from tpe.logging import get_logger


_logger = get_logger(__name__)


class ParzenEstimator(NamedTuple):
    """Parzen window based density estimator.

    An equally weighted mixture of normal distributions, one per observation plus one prior at
    the center of ``param_range``, truncated to ``param_range``. This can be used for numerical
    parameters.
    """

    mus: np.ndarray
    sigmas: np.ndarray
    param_range: Range
    log_p_accept: float
    max_rejection_rounds: int

    @property
    def n_components(self) -> int:
        return self.mus.size

    def sample(self, rng: np.random.RandomState, size: int) -> np.ndarray:
        low, high = self.param_range.start, self.param_range.end
        samples = np.empty(size, dtype=np.float64)
        pending = np.arange(size)
        for _ in range(self.max_rejection_rounds):
            if pending.size == 0:
                return samples

            active_indices = rng.randint(self.n_components, size=pending.size)
            draws = rng.normal(self.mus[active_indices], self.sigmas[active_indices])
            accepted = (low <= draws) & (draws < high)
            samples[pending[accepted]] = draws[accepted]
            pending = pending[~accepted]

        if pending.size == 0:
            return samples

        _logger.debug(
            f"{pending.size} draw(s) were still rejected after {self.max_rejection_rounds} "
            "rounds, so they are drawn from the truncated components instead."
        )
        active_indices = rng.randint(self.n_components, size=pending.size)
        draws = _truncnorm.sample_truncated(
            rng, self.mus[active_indices], self.sigmas[active_indices], low, high
        )
        # The quantile function may round onto the excluded upper bound.
        samples[pending] = np.clip(draws, low, np.nextafter(high, low))
        return samples

    def log_pdf(self, x: np.ndarray | float) -> np.ndarray:
        x = np.atleast_1d(np.asarray(x, dtype=np.float64))
        # log_pdfs.shape = (len(x), n_components)
        log_pdfs = _truncnorm.norm_logpdf(x[:, np.newaxis], self.mus, self.sigmas)
        weighted_log_pdf = log_pdfs - np.log(self.n_components) - self.log_p_accept
        max_ = weighted_log_pdf.max(axis=1)
        # We need to avoid (-inf) - (-inf) when the probability is zero.
        max_[np.isneginf(max_)] = 0
        with np.errstate(divide="ignore"):  # Suppress warning in log(0).
            return np.log(np.exp(weighted_log_pdf - max_[:, np.newaxis]).sum(axis=1)) + max_


class ParzenEstimatorBuilder:
    """Builder of :class:`ParzenEstimator`.

    Args:
        max_rejection_rounds:
            The number of rejection sampling rounds in :meth:`ParzenEstimator.sample` before the
            remaining draws fall back to inverse-CDF sampling of the truncated components.
    """

    def __init__(self, max_rejection_rounds: int = 100) -> None:
        if max_rejection_rounds < 0:
            raise ValueError(
                f"max_rejection_rounds must be non-negative, but got {max_rejection_rounds}."
            )
        self._max_rejection_rounds = max_rejection_rounds

    def build(self, observations: Iterable[float], param_range: Range) -> ParzenEstimator:
        observations = np.fromiter(observations, dtype=np.float64)
        prior = (param_range.start + param_range.end) * 0.5
        mus = np.sort(np.append(observations, prior))
        sigmas = _calculate_sigmas(mus, param_range)
        log_mass = _truncnorm.log_gauss_mass_in(
            param_range.start, param_range.end, loc=mus, scale=sigmas
        )
        # p_accept is the mean of the masses.
        max_log_mass = log_mass.max()
        log_p_accept = (
            np.log(np.exp(log_mass - max_log_mass).sum()) + max_log_mass - np.log(mus.size)
        )
        return ParzenEstimator(
            mus=mus,
            sigmas=sigmas,
            param_range=param_range,
            log_p_accept=float(log_p_accept),
            max_rejection_rounds=self._max_rejection_rounds,
        )

    def __repr__(self) -> str:
        return f"ParzenEstimatorBuilder(max_rejection_rounds={self._max_rejection_rounds})"


def _calculate_sigmas(mus: np.ndarray, param_range: Range) -> np.ndarray:
    # mus must be sorted.
    n = mus.size
    prev = np.append(param_range.start, mus[:-1])
    succ = np.append(mus[1:], param_range.end)
    sigmas = np.maximum(mus - prev, succ - mus)
    if n >= 2:
        # The outermost components only look inward.
        sigmas[0] = mus[1] - mus[0]
        sigmas[-1] = mus[-1] - mus[-2]

    max_sigma = param_range.width
    min_sigma = param_range.width / min(100.0, 1.0 + n)
    return np.clip(sigmas, min_sigma, max_sigma)
