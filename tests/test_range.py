from __future__ import annotations

import math

import numpy as np
import pytest

import tpe
from tpe.exceptions import EmptyRangeError
from tpe.exceptions import NonFiniteRangeError
from tpe.exceptions import RangeError


def test_range() -> None:
    r = tpe.range(-5.0, 5.0)
    assert r.start == -5.0
    assert r.end == 5.0
    assert r.width == 10.0
    assert str(r) == "[-5.0, 5.0)"
    assert r == tpe.Range(-5, 5)
    assert hash(r) == hash(tpe.Range(-5, 5))


@pytest.mark.parametrize(
    "start,end",
    [
        (0.0, math.inf),
        (-math.inf, 0.0),
        (math.nan, 1.0),
        (0.0, math.nan),
        (-1e308, 1e308),
    ],
)
def test_non_finite_range(start: float, end: float) -> None:
    with pytest.raises(NonFiniteRangeError) as e:
        tpe.range(start, end)
    assert e.value.start is start
    assert e.value.end is end


@pytest.mark.parametrize("start,end", [(1.0, 1.0), (2.0, 1.0)])
def test_empty_range(start: float, end: float) -> None:
    with pytest.raises(EmptyRangeError):
        tpe.range(start, end)


def test_range_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        tpe.range(1.0, 0.0)
    assert issubclass(RangeError, tpe.exceptions.TPEError)


def test_contains_is_half_open() -> None:
    r = tpe.range(-1.0, 1.0)
    for v in np.random.RandomState(0).uniform(-2.0, 2.0, size=1000):
        assert r.contains(v) == (-1.0 <= v < 1.0)
    assert r.contains(-1.0)
    assert not r.contains(1.0)
    assert not r.contains(math.nan)
    assert 0.0 in r


def test_categorical_range() -> None:
    assert tpe.categorical_range(3) == tpe.range(0.0, 3.0)
    with pytest.raises(ValueError):
        tpe.categorical_range(0)
