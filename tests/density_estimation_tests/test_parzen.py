from __future__ import annotations

import numpy as np
import pytest
from scipy.stats import norm

import tpe
from tpe.density_estimation import ParzenEstimator
from tpe.density_estimation import ParzenEstimatorBuilder
from tpe.density_estimation._parzen import _calculate_sigmas


@pytest.fixture
def param_range() -> tpe.Range:
    return tpe.range(0.0, 10.0)


def test_empty_observations_have_only_prior(param_range: tpe.Range) -> None:
    mpe = ParzenEstimatorBuilder().build([], param_range)
    assert isinstance(mpe, ParzenEstimator)
    assert np.array_equal(mpe.mus, [5.0])
    # max(5, 5) is already the lower bound 10 / min(100, 1 + 1).
    assert np.array_equal(mpe.sigmas, [5.0])


def test_prior_is_appended_and_sorted(param_range: tpe.Range) -> None:
    mpe = ParzenEstimatorBuilder().build(iter([8.0, 1.0, 3.0]), param_range)
    assert np.array_equal(mpe.mus, [1.0, 3.0, 5.0, 8.0])
    assert mpe.n_components == 4


def test_sigmas_use_inward_gaps_at_both_ends(param_range: tpe.Range) -> None:
    mus = np.asarray([1.0, 3.0, 5.0, 8.0])
    sigmas = _calculate_sigmas(mus, param_range)
    # The first and last components ignore range.start and range.end.
    # The inner ones take the larger neighbour gap. The lower bound is 10 / 5 = 2.
    assert np.allclose(sigmas, [2.0, 2.0, 3.0, 3.0])


def test_sigmas_are_clipped() -> None:
    param_range = tpe.range(0.0, 1.0)
    mus = np.asarray([0.5, 0.5, 0.5])
    sigmas = _calculate_sigmas(mus, param_range)
    assert np.allclose(sigmas, 1.0 / 4.0)

    mus = np.linspace(0.0, 0.999, 300)
    sigmas = _calculate_sigmas(mus, param_range)
    assert np.all(sigmas >= 1.0 / 100.0)
    assert np.all(sigmas <= 1.0)


def test_p_accept(param_range: tpe.Range) -> None:
    mpe = ParzenEstimatorBuilder().build([1.0, 3.0, 8.0], param_range)
    masses = norm.cdf(10.0, loc=mpe.mus, scale=mpe.sigmas) - norm.cdf(
        0.0, loc=mpe.mus, scale=mpe.sigmas
    )
    assert np.isclose(mpe.log_p_accept, np.log(masses.mean()))


def test_log_pdf_matches_truncated_mixture(param_range: tpe.Range) -> None:
    mpe = ParzenEstimatorBuilder().build([1.0, 3.0, 8.0], param_range)
    x = np.linspace(0.0, 9.99, 17)
    pdfs = norm.pdf(x[:, None], loc=mpe.mus, scale=mpe.sigmas).mean(axis=1)
    expected = np.log(pdfs) - mpe.log_p_accept
    assert np.allclose(mpe.log_pdf(x), expected)


def test_log_pdf_integrates_to_one(param_range: tpe.Range) -> None:
    mpe = ParzenEstimatorBuilder().build([0.2, 0.3, 4.0, 9.5], param_range)
    x = np.linspace(0.0, 10.0, 100001)
    assert np.isclose(np.exp(mpe.log_pdf(x)).mean() * param_range.width, 1.0, rtol=1e-3)


def test_log_pdf_is_finite_in_far_tail() -> None:
    param_range = tpe.range(0.0, 1000.0)
    mpe = ParzenEstimatorBuilder().build(np.linspace(0.0, 1.0, 200), param_range)
    log_pdf = mpe.log_pdf(np.asarray([999.0]))
    assert np.isfinite(log_pdf).all()


def test_log_pdf_accepts_scalar(param_range: tpe.Range) -> None:
    mpe = ParzenEstimatorBuilder().build([], param_range)
    assert mpe.log_pdf(5.0).shape == (1,)


@pytest.mark.parametrize("observations", [[], [0.0], [9.99, 9.99, 9.98], np.linspace(0, 9.9, 50)])
def test_sample_within_range(param_range: tpe.Range, observations: list[float]) -> None:
    mpe = ParzenEstimatorBuilder().build(observations, param_range)
    samples = mpe.sample(np.random.RandomState(0), 1000)
    assert samples.shape == (1000,)
    assert np.all(samples >= 0.0)
    assert np.all(samples < 10.0)


def test_sample_is_deterministic(param_range: tpe.Range) -> None:
    mpe = ParzenEstimatorBuilder().build([1.0, 2.0, 7.0], param_range)
    s1 = mpe.sample(np.random.RandomState(42), 24)
    s2 = mpe.sample(np.random.RandomState(42), 24)
    assert np.array_equal(s1, s2)


def test_sample_falls_back_to_truncated_components(param_range: tpe.Range) -> None:
    mpe = ParzenEstimatorBuilder(max_rejection_rounds=0).build([0.01, 9.99], param_range)
    samples = mpe.sample(np.random.RandomState(0), 1000)
    assert np.all(samples >= 0.0)
    assert np.all(samples < 10.0)
    assert len(np.unique(samples)) > 1


def test_sample_follows_log_pdf(param_range: tpe.Range) -> None:
    mpe = ParzenEstimatorBuilder().build([2.0, 2.1, 2.2, 2.3], param_range)
    samples = mpe.sample(np.random.RandomState(0), 20000)
    hist, edges = np.histogram(samples, bins=10, range=(0.0, 10.0), density=True)
    x = np.linspace(0.0, 10.0, 10001)
    pdf = np.exp(mpe.log_pdf(x))
    expected = [pdf[(x >= lo) & (x < hi)].mean() for lo, hi in zip(edges[:-1], edges[1:])]
    assert np.allclose(hist, expected, atol=0.02)


def test_invalid_max_rejection_rounds() -> None:
    with pytest.raises(ValueError):
        ParzenEstimatorBuilder(max_rejection_rounds=-1)
