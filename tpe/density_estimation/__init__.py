from tpe.density_estimation._base import DensityEstimator
from tpe.density_estimation._base import DensityEstimatorBuilder
from tpe.density_estimation._base import histogram_estimator
from tpe.density_estimation._base import parzen_estimator
from tpe.density_estimation._histogram import HistogramEstimator
from tpe.density_estimation._histogram import HistogramEstimatorBuilder
from tpe.density_estimation._parzen import ParzenEstimator
from tpe.density_estimation._parzen import ParzenEstimatorBuilder


__all__ = [
    "DensityEstimator",
    "DensityEstimatorBuilder",
    "HistogramEstimator",
    "HistogramEstimatorBuilder",
    "ParzenEstimator",
    "ParzenEstimatorBuilder",
    "histogram_estimator",
    "parzen_estimator",
]
