from __future__ import annotations

from collections.abc import Iterable
import math
from typing import NamedTuple

import numpy as np

from tpe._range import Range


class HistogramEstimator(NamedTuple):
    """Smoothed histogram over the integer bins ``0, 1, ..., cardinality - 1``.

    This can be used for categorical parameters whose values are told as bin indices.
    """

    probabilities: np.ndarray

    @property
    def cardinality(self) -> int:
        return self.probabilities.size

    def sample(self, rng: np.random.RandomState, size: int) -> np.ndarray:
        rnd_quantile = rng.rand(size)
        cum_probs = np.cumsum(self.probabilities)
        assert np.isclose(cum_probs[-1], 1)
        cum_probs[-1] = 1  # Avoid numerical errors.
        return np.sum(cum_probs[np.newaxis, :] < rnd_quantile[:, np.newaxis], axis=-1).astype(
            np.float64
        )

    def log_pdf(self, x: np.ndarray | float) -> np.ndarray:
        indices = _to_bin_indices(np.atleast_1d(np.asarray(x, dtype=np.float64)), self.cardinality)
        return np.log(self.probabilities[indices])


class HistogramEstimatorBuilder:
    """Builder of :class:`HistogramEstimator`.

    Every bin starts with one pseudo-count (additive smoothing), so unseen categories keep a
    positive probability.
    """

    def build(self, observations: Iterable[float], param_range: Range) -> HistogramEstimator:
        observations = np.fromiter(observations, dtype=np.float64)
        cardinality = int(math.ceil(param_range.width))
        indices = _to_bin_indices(observations, cardinality)
        n = observations.size + cardinality
        counts = np.bincount(indices, minlength=cardinality)
        return HistogramEstimator(probabilities=(counts + 1) / n)

    def __repr__(self) -> str:
        return "HistogramEstimatorBuilder()"


def _to_bin_indices(x: np.ndarray, cardinality: int) -> np.ndarray:
    # Values must already be bin indices, not raw categorical choices.
    indices = np.floor(x)
    if indices.size and not ((0 <= indices) & (indices < cardinality)).all():
        raise ValueError(
            f"Bin indices must be in [0, {cardinality}), but got "
            f"{x[~((0 <= indices) & (indices < cardinality))].tolist()}."
        )
    return indices.astype(np.int64)
