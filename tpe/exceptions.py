from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from tpe._range import Range


class TPEError(Exception):
    """Base class for the errors raised by this package."""

    pass


class ExperimentalWarning(Warning):
    """Experimental Warning class.

    This warning is raised when a feature whose interface may still change is used.
    """

    pass


class RangeError(TPEError, ValueError):
    """Raised when a parameter range cannot be built."""

    def __init__(self, message: str, start: float, end: float) -> None:
        super().__init__(message)
        self.start = start
        self.end = end


class NonFiniteRangeError(RangeError):
    def __init__(self, start: float, end: float) -> None:
        super().__init__(f"Not a finite range: start={start}, end={end}.", start, end)


class EmptyRangeError(RangeError):
    def __init__(self, start: float, end: float) -> None:
        super().__init__(
            f"An empty range: start must be less than end, but got start={start}, end={end}.",
            start,
            end,
        )


class BuildError(TPEError, ValueError):
    """Raised when the optimizer settings are invalid."""

    pass


class GammaOutOfRangeError(BuildError):
    def __init__(self, gamma: float) -> None:
        super().__init__(f"gamma must be in the range from 0.0 to 1.0, but got {gamma}.")
        self.gamma = gamma


class ZeroCandidatesError(BuildError):
    def __init__(self, n_candidates: int) -> None:
        super().__init__(f"n_candidates must be a positive integer, but got {n_candidates}.")
        self.n_candidates = n_candidates


class TellError(TPEError, ValueError):
    """Raised when an evaluation result cannot be told to the optimizer."""

    pass


class NanValueError(TellError):
    def __init__(self, param: float | None, value: float) -> None:
        super().__init__(f"NaN value is not allowed, but got value={value} for param={param}.")
        self.param = param
        self.value = value


class ParamOutOfRangeError(TellError):
    def __init__(self, param: float, param_range: Range) -> None:
        super().__init__(f"The parameter value {param} is out of the range {param_range}.")
        self.param = param
        self.param_range = param_range


class HistogramRangeError(BuildError):
    def __init__(self, param_range: Range) -> None:
        super().__init__(
            f"A histogram estimator needs a range starting at 0, but got {param_range}. "
            "Use categorical_range."
        )
        self.param_range = param_range


class InvalidBinError(TellError):
    def __init__(self, param: float) -> None:
        super().__init__(f"The parameter value {param} is not a bin index (an integer).")
        self.param = param
