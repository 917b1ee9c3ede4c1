from __future__ import annotations

import math

from tpe.exceptions import EmptyRangeError
from tpe.exceptions import NonFiniteRangeError


class Range:
    """Half-open interval ``[start, end)`` bounding the domain of a parameter.

    Args:
        start:
            Inclusive lower bound.
        end:
            Exclusive upper bound. ``end - start`` must be a positive finite number.

    Raises:
        :exc:`~tpe.exceptions.NonFiniteRangeError`:
            If ``end - start`` is not finite, including NaN bounds.
        :exc:`~tpe.exceptions.EmptyRangeError`:
            If ``start < end`` does not hold.
    """

    __slots__ = ("_start", "_end")

    def __init__(self, start: float, end: float) -> None:
        if not math.isfinite(end - start):
            raise NonFiniteRangeError(start, end)
        if not start < end:
            raise EmptyRangeError(start, end)

        self._start = float(start)
        self._end = float(end)

    @property
    def start(self) -> float:
        return self._start

    @property
    def end(self) -> float:
        return self._end

    @property
    def width(self) -> float:
        return self._end - self._start

    def contains(self, value: float) -> bool:
        return self._start <= value < self._end

    def __contains__(self, value: float) -> bool:
        return self.contains(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self._start == other._start and self._end == other._end

    def __hash__(self) -> int:
        return hash((self._start, self._end))

    def __repr__(self) -> str:
        return f"Range(start={self._start}, end={self._end})"

    def __str__(self) -> str:
        return f"[{self._start}, {self._end})"


def range(start: float, end: float) -> Range:
    """Create a :class:`Range` from ``start`` (inclusive) to ``end`` (exclusive)."""
    return Range(start, end)


def categorical_range(cardinality: int) -> Range:
    """Create a :class:`Range` for a categorical parameter.

    This is equivalent to ``range(0, cardinality)``; every integer in it is a bin index.
    """
    if cardinality < 1:
        raise ValueError(f"cardinality must be a positive integer, but got {cardinality}.")
    return Range(0.0, float(cardinality))
