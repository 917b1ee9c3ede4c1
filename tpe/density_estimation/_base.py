from __future__ import annotations

from typing import Union

from tpe.density_estimation._histogram import HistogramEstimator
from tpe.density_estimation._histogram import HistogramEstimatorBuilder
from tpe.density_estimation._parzen import ParzenEstimator
from tpe.density_estimation._parzen import ParzenEstimatorBuilder


# Both variants expose ``sample(rng, size)`` and ``log_pdf(x)``.
DensityEstimator = Union[ParzenEstimator, HistogramEstimator]

# Both variants expose ``build(observations, param_range)``.
DensityEstimatorBuilder = Union[ParzenEstimatorBuilder, HistogramEstimatorBuilder]


def parzen_estimator() -> ParzenEstimatorBuilder:
    """Return the builder of :class:`ParzenEstimator` (for numerical parameters)."""
    return ParzenEstimatorBuilder()


def histogram_estimator() -> HistogramEstimatorBuilder:
    """Return the builder of :class:`HistogramEstimator` (for categorical parameters)."""
    return HistogramEstimatorBuilder()
