from tpe import density_estimation
from tpe import distributions
from tpe import exceptions
from tpe import logging
from tpe._optimizer import TpeOptimizer
from tpe._range import categorical_range
from tpe._range import range
from tpe._range import Range
from tpe.density_estimation import histogram_estimator
from tpe.density_estimation import parzen_estimator
from tpe.solver import SolverTrial
from tpe.solver import TPESolver
from tpe.version import __version__


__all__ = [
    "Range",
    "SolverTrial",
    "TPESolver",
    "TpeOptimizer",
    "__version__",
    "categorical_range",
    "density_estimation",
    "distributions",
    "exceptions",
    "histogram_estimator",
    "logging",
    "parzen_estimator",
    "range",
]
