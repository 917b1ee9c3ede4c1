from __future__ import annotations

import math

import numpy as np
import pytest

import tpe
from tpe.density_estimation import HistogramEstimatorBuilder
from tpe.density_estimation import ParzenEstimatorBuilder
from tpe.distributions import CategoricalDistribution
from tpe.distributions import FloatDistribution
from tpe.distributions import IntDistribution


def test_float_distribution() -> None:
    dist = FloatDistribution(-1.0, 2.0)
    assert dist.param_range() == tpe.range(-1.0, 2.0)
    assert isinstance(dist.estimator_builder(), ParzenEstimatorBuilder)
    assert dist.to_internal_repr(0.5) == 0.5
    assert dist.to_external_repr(0.5) == 0.5
    assert dist.to_external_repr(2.0) < 2.0
    assert not dist.single()


def test_float_log_distribution() -> None:
    dist = FloatDistribution(1e-3, 1.0, log=True)
    assert dist.param_range() == tpe.range(math.log(1e-3), 0.0)
    assert math.isclose(dist.to_internal_repr(0.1), math.log(0.1))
    assert math.isclose(dist.to_external_repr(math.log(0.1)), 0.1)
    assert dist.to_external_repr(math.log(1e-3)) >= 1e-3


@pytest.mark.parametrize(
    "kwargs", [dict(low=1.0, high=1.0), dict(low=2.0, high=1.0), dict(low=0.0, high=1.0, log=True)]
)
def test_invalid_float_distribution(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        FloatDistribution(**kwargs)


def test_float_internal_repr_rejects_nan() -> None:
    with pytest.raises(ValueError):
        FloatDistribution(0.0, 1.0).to_internal_repr(math.nan)


def test_int_distribution() -> None:
    dist = IntDistribution(1, 3)
    assert dist.param_range() == tpe.range(1.0, 4.0)
    assert isinstance(dist.estimator_builder(), ParzenEstimatorBuilder)
    assert dist.to_internal_repr(2) == 2.0
    assert dist.to_external_repr(2.99) == 2
    assert dist.to_external_repr(3.5) == 3
    assert isinstance(dist.to_external_repr(1.2), int)
    assert IntDistribution(2, 2).single()


@pytest.mark.parametrize("value", [1, 2, 7, 99, 100])
def test_int_log_distribution_round_trips(value: int) -> None:
    dist = IntDistribution(1, 100, log=True)
    internal = dist.to_internal_repr(value)
    assert dist.param_range().contains(internal)
    assert dist.to_external_repr(internal) == value


@pytest.mark.parametrize(
    "kwargs", [dict(low=2, high=1), dict(low=0, high=10, log=True)]
)
def test_invalid_int_distribution(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        IntDistribution(**kwargs)


def test_categorical_distribution() -> None:
    dist = CategoricalDistribution(["a", "b", None])
    assert dist.param_range() == tpe.categorical_range(3)
    assert isinstance(dist.estimator_builder(), HistogramEstimatorBuilder)
    assert dist.to_internal_repr("b") == 1.0
    assert dist.to_internal_repr(None) == 2.0
    assert dist.to_external_repr(1.0) == "b"
    assert not dist.single()
    assert CategoricalDistribution([1]).single()
    with pytest.raises(ValueError):
        dist.to_internal_repr("c")
    with pytest.raises(ValueError):
        CategoricalDistribution([])


@pytest.mark.parametrize(
    "dist",
    [
        FloatDistribution(-1.0, 1.0),
        FloatDistribution(1e-5, 1.0, log=True),
        IntDistribution(0, 3),
        IntDistribution(1, 1024, log=True),
        CategoricalDistribution([True, False]),
    ],
)
def test_sample_uniform_within_range(dist) -> None:
    rng = np.random.RandomState(0)
    for _ in range(100):
        assert dist.param_range().contains(dist.sample_uniform(rng))


def test_equality() -> None:
    assert FloatDistribution(0.0, 1.0) == FloatDistribution(0.0, 1.0)
    assert FloatDistribution(0.1, 1.0) != FloatDistribution(0.1, 1.0, log=True)
    assert FloatDistribution(1.0, 2.0) != IntDistribution(1, 2)
    assert hash(CategoricalDistribution([1, 2])) == hash(CategoricalDistribution((1, 2)))
    assert repr(IntDistribution(1, 2)) == "IntDistribution(high=2, log=False, low=1)"
