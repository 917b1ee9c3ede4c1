# This file contains the codes from SciPy project.
#
# Copyright (c) 2001-2002 Enthought, Inc. 2003-2022, SciPy Developers.
# All rights reserved.

# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions
# are met:

# 1. Redistributions of source code must retain the above copyright
#    notice, this list of conditions and the following disclaimer.

# 2. Redistributions in binary form must reproduce the above
#    copyright notice, this list of conditions and the following
#    disclaimer in the documentation and/or other materials provided
#    with the distribution.

# 3. Neither the name of the copyright holder nor the names of its
#    contributors may be used to endorse or promote products derived
#    from this software without specific prior written permission.

# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
# "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
# LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR
# A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT
# OWNER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL,
# SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE,
# DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY
# THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT
# (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
# OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

from __future__ import annotations

import math
import sys

import numpy as np


_norm_pdf_logC = 0.5 * math.log(2 * math.pi)
_ndtri_exp_approx_C = math.sqrt(3) / math.pi
_log_2 = math.log(2)
_sqrt_2 = 2**0.5


def _log_ndtr_negative_single(a: float) -> float:
    # log(ndtr(a)) for a <= 0. Below -20 the asymptotic series of the Mills ratio is used.
    if a > -20:
        return math.log(0.5 * (math.erfc(-a / _sqrt_2) if a < -1 else 1 + math.erf(a / _sqrt_2)))

    log_lhs = -0.5 * a**2 - math.log(-a) - _norm_pdf_logC
    last_total = 0.0
    right_hand_side = 1.0
    numerator = 1.0
    denom_factor = 1.0
    denom_cons = 1 / a**2
    sign = 1
    i = 0
    while abs(last_total - right_hand_side) > sys.float_info.epsilon:
        i += 1
        last_total = right_hand_side
        sign = -sign
        denom_factor *= denom_cons
        numerator *= 2 * i - 1
        right_hand_side += sign * numerator * denom_factor

    return log_lhs + math.log(right_hand_side)


def _log_ndtr_negative(a: np.ndarray) -> np.ndarray:
    return np.asarray([_log_ndtr_negative_single(v) for v in a.ravel()]).reshape(a.shape)


def _ndtr_negative(a: np.ndarray) -> np.ndarray:
    return 0.5 * (1 + np.asarray([math.erf(v) for v in a.ravel() / _sqrt_2])).reshape(a.shape)


def _log_gauss_mass(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Log of the standard Gaussian probability mass within ``[a, b]``.

    The right tail is inaccurate, so intervals with ``a > 0`` are mirrored into the left tail.
    Intervals straddling zero are computed as ``log1p(-ndtr(a) - ndtr(-b))`` to avoid the
    catastrophic cancellation of ``log(ndtr(b) - ndtr(a))`` when the mass approaches one.
    The inputs are not modified.
    """
    a, b = np.broadcast_arrays(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))
    a, b = a.copy(), b.copy()
    right_inds = np.nonzero(a > 0)
    a[right_inds], b[right_inds] = -b[right_inds], -a[right_inds]
    out = np.empty_like(a)
    if (left_inds := np.nonzero(b <= 0))[0].size:
        log_ndtr_b = _log_ndtr_negative(b[left_inds])
        log_ndtr_a = _log_ndtr_negative(a[left_inds])
        out[left_inds] = log_ndtr_b + np.log1p(-np.exp(log_ndtr_a - log_ndtr_b))
    if (central_inds := np.nonzero(b > 0))[0].size:
        out[central_inds] = np.log1p(
            -_ndtr_negative(a[central_inds]) - _ndtr_negative(-b[central_inds])
        )
    return out


def _ndtri_exp(y: np.ndarray) -> np.ndarray:
    """
    Return ``x`` such that ``log_ndtr(x) = y`` by the Newton method.

    The update is ``x <- x - (log_ndtr(x) - y) * ndtr(x) / norm_pdf(x)``. For ``y > -log(2)`` the
    root is positive, so the problem is flipped via ``log_ndtr(-x) = log(-expm1(y))`` and the
    sign restored at the end; the iteration therefore always runs on negative ``x``.

    Initial guesses:
        - ``y < -5``: the tail approximation ``y ~ -x**2 / 2 - log(2pi) / 2``.
        - otherwise: the standard logistic approximation of ``ndtr``, i.e.
          ``x ~ -sqrt(3) / pi * log(exp(-y) - 1)``.
    """
    y = np.array(y, dtype=np.float64)
    flipped = y > -_log_2
    y[flipped] = np.log(-np.expm1(y[flipped]))
    x = np.empty_like(y)
    if (small_inds := np.nonzero(y < -5))[0].size:
        x[small_inds] = -np.sqrt(-2.0 * (y[small_inds] + _norm_pdf_logC))
    if (moderate_inds := np.nonzero(y >= -5))[0].size:
        x[moderate_inds] = -_ndtri_exp_approx_C * np.log(np.expm1(-y[moderate_inds]))

    for _ in range(100):
        log_ndtr_x = _log_ndtr_negative(x)
        # NOTE: exp(log_ndtr_x - norm_logpdf_x) is more stable than ndtr_x / norm_pdf_x.
        norm_logpdf_x = -(x**2) / 2.0 - _norm_pdf_logC
        dx = (log_ndtr_x - y) * np.exp(log_ndtr_x - norm_logpdf_x)
        x -= dx
        if np.all(np.abs(dx) < 1e-8 * -x):
            break
    x[flipped] *= -1
    return x


def _ppf(q: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    # Standardized truncnorm quantile. Bounds with a >= 0 are mirrored into the left tail.
    log_mass = _log_gauss_mass(a, b)
    mirrored = a >= 0
    lower = np.where(mirrored, -b, a)
    with np.errstate(divide="ignore"):
        log_q = np.where(mirrored, np.log1p(-q), np.log(q))
    x = _ndtri_exp(np.logaddexp(_log_ndtr_negative(lower), log_mass + log_q))
    return np.where(mirrored, -x, x)


def sample_truncated(
    rng: np.random.RandomState,
    loc: np.ndarray,
    scale: np.ndarray,
    low: float,
    high: float,
) -> np.ndarray:
    """Draw one value from each ``N(loc[i], scale[i])`` truncated to ``[low, high]``.

    This uses the inverse CDF, so it never rejects and consumes exactly ``loc.size`` uniforms.
    """
    quantiles = rng.uniform(low=0, high=1, size=loc.size)
    return _ppf(quantiles, (low - loc) / scale, (high - loc) / scale) * scale + loc


def norm_logpdf(
    x: np.ndarray,
    loc: np.ndarray | float = 0,
    scale: np.ndarray | float = 1,
) -> np.ndarray:
    z = (x - loc) / scale
    return -(z**2) / 2.0 - _norm_pdf_logC - np.log(scale)


def log_gauss_mass_in(
    low: float,
    high: float,
    loc: np.ndarray,
    scale: np.ndarray,
) -> np.ndarray:
    """Log of the mass each untruncated normal ``N(loc, scale)`` places inside ``[low, high]``."""
    return _log_gauss_mass((low - loc) / scale, (high - loc) / scale)
