"""Parameter distributions and their transforms to the optimizer's internal domain.

A :class:`~tpe.TpeOptimizer` works on a linear :class:`~tpe.Range`. The distributions in
this module describe the native domain of a parameter and convert values between the two via
``to_internal_repr`` (warp) and ``to_external_repr`` (unwarp).
"""

from __future__ import annotations

import abc
import math
from typing import Any
from typing import Sequence
from typing import Union

import numpy as np

from tpe._range import categorical_range
from tpe._range import Range
from tpe.density_estimation import histogram_estimator
from tpe.density_estimation import HistogramEstimatorBuilder
from tpe.density_estimation import parzen_estimator
from tpe.density_estimation import ParzenEstimatorBuilder


CategoricalChoiceType = Union[None, bool, int, float, str]


class BaseDistribution(abc.ABC):
    """Base class for parameter distributions."""

    @abc.abstractmethod
    def param_range(self) -> Range:
        """Return the internal range the optimizer searches."""
        raise NotImplementedError

    @abc.abstractmethod
    def estimator_builder(self) -> ParzenEstimatorBuilder | HistogramEstimatorBuilder:
        raise NotImplementedError

    @abc.abstractmethod
    def to_internal_repr(self, param_value_in_external_repr: Any) -> float:
        raise NotImplementedError

    @abc.abstractmethod
    def to_external_repr(self, param_value_in_internal_repr: float) -> Any:
        raise NotImplementedError

    @abc.abstractmethod
    def single(self) -> bool:
        """Test whether the range of this distribution contains just a single value."""
        raise NotImplementedError

    def sample_uniform(self, rng: np.random.RandomState) -> float:
        """Draw an internal value uniformly from :meth:`param_range`."""
        param_range = self.param_range()
        # uniform may round onto the excluded upper bound.
        return float(
            min(
                rng.uniform(param_range.start, param_range.end),
                np.nextafter(param_range.end, param_range.start),
            )
        )

    def __repr__(self) -> str:
        kwargs = ", ".join(f"{k}={v!r}" for k, v in sorted(self.__dict__.items()))
        return f"{self.__class__.__name__}({kwargs})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BaseDistribution):
            return NotImplemented
        if type(self) is not type(other):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash((self.__class__,) + tuple(sorted(self.__dict__.items())))


class FloatDistribution(BaseDistribution):
    """A distribution on floats in ``[low, high)``.

    Args:
        low:
            Lower endpoint of the range. Must be positive if ``log`` is :obj:`True`.
        high:
            Upper endpoint of the range (exclusive).
        log:
            If ``log`` is :obj:`True`, the parameter is searched in the log domain.
    """

    def __init__(self, low: float, high: float, log: bool = False) -> None:
        if log and low <= 0.0:
            raise ValueError(
                "The `low` value must be larger than 0 for a log distribution "
                f"(low={low}, high={high})."
            )
        if not low < high:
            raise ValueError(
                "The `low` value must be smaller than the `high` value "
                f"(low={low}, high={high})."
            )

        self.low = float(low)
        self.high = float(high)
        self.log = log

    def param_range(self) -> Range:
        if self.log:
            return Range(math.log(self.low), math.log(self.high))
        return Range(self.low, self.high)

    def estimator_builder(self) -> ParzenEstimatorBuilder:
        return parzen_estimator()

    def to_internal_repr(self, param_value_in_external_repr: float) -> float:
        value = float(param_value_in_external_repr)
        if math.isnan(value):
            raise ValueError(f"`{param_value_in_external_repr}` is invalid value.")
        return math.log(value) if self.log else value

    def to_external_repr(self, param_value_in_internal_repr: float) -> float:
        value = (
            math.exp(param_value_in_internal_repr) if self.log else param_value_in_internal_repr
        )
        # exp may round onto the excluded upper bound.
        return min(max(value, self.low), float(np.nextafter(self.high, self.low)))

    def single(self) -> bool:
        return False


class IntDistribution(BaseDistribution):
    """A distribution on integers in ``[low, high]``.

    Internally the integer ``k`` owns the interval ``[k, k + 1)`` (or its log), so a sampled
    value is floored back to an integer.

    Args:
        low:
            Lower endpoint of the range (inclusive). Must be positive if ``log`` is :obj:`True`.
        high:
            Upper endpoint of the range (inclusive).
        log:
            If ``log`` is :obj:`True`, the parameter is searched in the log domain.
    """

    def __init__(self, low: int, high: int, log: bool = False) -> None:
        if log and low < 1:
            raise ValueError(
                "The `low` value must be equal to or greater than 1 for a log distribution "
                f"(low={low}, high={high})."
            )
        if low > high:
            raise ValueError(
                "The `low` value must be smaller than or equal to the `high` value "
                f"(low={low}, high={high})."
            )

        self.low = int(low)
        self.high = int(high)
        self.log = log

    def param_range(self) -> Range:
        if self.log:
            return Range(math.log(self.low), math.log(self.high + 1))
        return Range(self.low, self.high + 1)

    def estimator_builder(self) -> ParzenEstimatorBuilder:
        return parzen_estimator()

    def to_internal_repr(self, param_value_in_external_repr: int) -> float:
        value = int(param_value_in_external_repr)
        # The log of the bin center, so that exp and floor give back the same integer.
        return math.log(value + 0.5) if self.log else float(value)

    def to_external_repr(self, param_value_in_internal_repr: float) -> int:
        value = (
            math.exp(param_value_in_internal_repr) if self.log else param_value_in_internal_repr
        )
        return min(max(int(math.floor(value)), self.low), self.high)

    def single(self) -> bool:
        return self.low == self.high


class CategoricalDistribution(BaseDistribution):
    """A categorical distribution.

    The optimizer sees the index of a choice as a histogram bin.

    Args:
        choices:
            Parameter value candidates. Must not be empty.
    """

    def __init__(self, choices: Sequence[CategoricalChoiceType]) -> None:
        if len(choices) == 0:
            raise ValueError("The `choices` must contain one or more elements.")

        self.choices = tuple(choices)

    def param_range(self) -> Range:
        return categorical_range(len(self.choices))

    def estimator_builder(self) -> HistogramEstimatorBuilder:
        return histogram_estimator()

    def to_internal_repr(self, param_value_in_external_repr: CategoricalChoiceType) -> float:
        try:
            return float(self.choices.index(param_value_in_external_repr))
        except ValueError as e:
            raise ValueError(
                f"'{param_value_in_external_repr}' not in {self.choices}."
            ) from e

    def to_external_repr(self, param_value_in_internal_repr: float) -> CategoricalChoiceType:
        return self.choices[int(param_value_in_internal_repr)]

    def sample_uniform(self, rng: np.random.RandomState) -> float:
        return float(rng.randint(len(self.choices)))

    def single(self) -> bool:
        return len(self.choices) == 1
