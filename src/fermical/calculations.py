"""Computation primitives for Bayesian calibration assessment.

A bucket's accuracy is modelled with a Beta(1, 1) prior updated by the
observed answers, giving a Beta(1 + correct, 1 + incorrect) posterior. The
posterior mass below, inside and above the declared confidence range decides
the calibration verdict.
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

from .config import Config, default_config
from .data_models import BucketAssessment, DetailedStatus
from .utils import validate_counts


LANCZOS_COEFFICIENTS = (
    76.18009172947146,
    -86.50532032941677,
    24.01409824083091,
    -1.231739572450155,
    0.001208650973866179,
    -0.000005395239384953,
)
LANCZOS_BASE = 1.000000000190015

CF_MAX_ITER = 200
CF_EPS = 1e-10

INVERSE_MAX_ITER = 80
INVERSE_TOL = 1e-8


def log_gamma(x: float) -> float:
    """Natural log of |Gamma(x)|, or ``inf`` for ``x <= 0``."""
    if x <= 0:
        return math.inf
    if x < 0.5:
        # Gamma(x) * Gamma(1 - x) = pi / sin(pi * x)
        return math.log(math.pi / math.sin(math.pi * x)) - log_gamma(1 - x)
    x -= 1
    series = LANCZOS_BASE
    for i, coefficient in enumerate(LANCZOS_COEFFICIENTS):
        series += coefficient / (x + i + 1)
    t = x + 5.5
    return 0.5 * math.log(2 * math.pi) + (x + 0.5) * math.log(t) - t + math.log(series)


def log_beta(a: float, b: float) -> float:
    return log_gamma(a) + log_gamma(b) - log_gamma(a + b)


def beta_incomplete(a: float, b: float, x: float) -> float:
    """Regularized incomplete beta function I_x(a, b)."""
    if not (math.isfinite(a) and a > 0 and math.isfinite(b) and b > 0):
        raise ValueError(f"beta parameters must be positive and finite, got a={a}, b={b}")
    if not 0.0 <= x <= 1.0:
        raise ValueError(f"x must be within [0, 1], got {x}")
    if x == 0:
        return 0.0
    if x == 1:
        return 1.0
    if x > (a + 1) / (a + b + 2):
        return 1.0 - beta_incomplete(b, a, 1 - x)

    front = math.exp(a * math.log(x) + b * math.log(1 - x) - log_beta(a, b)) / a
    return front * (_betacf(a, b, x) - 1.0)


def _betacf(a: float, b: float, x: float) -> float:
    # Modified Lentz evaluation; the m == 0 term seeds the fraction with 1.
    f, c, d = 1.0, 1.0, 0.0
    for m in range(CF_MAX_ITER + 1):
        if m == 0:
            numerator = 1.0
        elif m % 2 == 0:
            k = m // 2
            numerator = (k * (b - k) * x) / ((a + 2 * k - 1) * (a + 2 * k))
        else:
            k = (m - 1) // 2
            numerator = -((a + k) * (a + b + k) * x) / ((a + 2 * k) * (a + 2 * k + 1))

        d = 1.0 + numerator * d
        if abs(d) < CF_EPS:
            d = CF_EPS
        d = 1.0 / d

        c = 1.0 + numerator / c
        if abs(c) < CF_EPS:
            c = CF_EPS

        delta = c * d
        f *= delta
        if abs(delta - 1.0) < CF_EPS:
            break
    return f


def beta_cdf(a: float, b: float, x: float) -> float:
    """P(X <= x) for X ~ Beta(a, b), clamped outside the unit interval."""
    if x <= 0:
        return 0.0
    if x >= 1:
        return 1.0
    return beta_incomplete(a, b, x)


def beta_inverse(alpha: float, beta: float, quantile: float) -> float:
    if not 0.0 <= quantile <= 1.0:
        raise ValueError("quantile must be within [0, 1]")
    if quantile == 0.0:
        return 0.0
    if quantile == 1.0:
        return 1.0

    lo, hi = 0.0, 1.0
    for _ in range(INVERSE_MAX_ITER):
        mid = (lo + hi) / 2.0
        cdf = beta_cdf(alpha, beta, mid)
        if abs(cdf - quantile) < INVERSE_TOL:
            return mid
        if cdf < quantile:
            lo = mid
        else:
            hi = mid
    return (lo + hi) / 2.0


def posterior_parameters(successes: int, total: int) -> Tuple[int, int]:
    successes, total = validate_counts(successes, total)
    return 1 + successes, 1 + (total - successes)


def posterior_interval(successes: int, total: int, mass: float = 0.90) -> Tuple[float, float]:
    """Equal-tailed credible interval for the bucket's true accuracy."""
    if not 0.0 < mass < 1.0:
        raise ValueError("mass must be within (0, 1)")
    alpha, beta = posterior_parameters(successes, total)
    tail = (1.0 - mass) / 2.0
    return beta_inverse(alpha, beta, tail), beta_inverse(alpha, beta, 1.0 - tail)


_OVER = {
    "decisive": DetailedStatus.DECISIVE_OVERCONFIDENCE,
    "very-strong": DetailedStatus.VERY_STRONG_OVERCONFIDENCE,
    "strong": DetailedStatus.STRONG_OVERCONFIDENCE,
    "moderate": DetailedStatus.MODERATE_OVERCONFIDENCE,
}
_UNDER = {
    "decisive": DetailedStatus.DECISIVE_UNDERCONFIDENCE,
    "very-strong": DetailedStatus.VERY_STRONG_UNDERCONFIDENCE,
    "strong": DetailedStatus.STRONG_UNDERCONFIDENCE,
    "moderate": DetailedStatus.MODERATE_UNDERCONFIDENCE,
}


def assess_bucket(
    successes: int,
    total: int,
    confidence_level: int,
    config: Optional[Config] = None,
) -> BucketAssessment:
    """Classify calibration for one confidence bucket.

    Unknown confidence levels and buckets below their minimum sample size
    yield ``insufficient-data`` with all probabilities set to zero. Otherwise
    the first match wins: overconfidence on ``prob_below``, underconfidence
    on ``prob_above``, then the in-range banding.
    """
    successes, total = validate_counts(successes, total)
    config = config or default_config()
    confidence_range = config.range_for(confidence_level)
    min_samples = config.min_samples_for(confidence_level)
    if confidence_range is None or min_samples is None or total < min_samples:
        return BucketAssessment.insufficient()

    alpha, beta = posterior_parameters(successes, total)
    lower, upper = confidence_range.fractions()
    prob_below = beta_cdf(alpha, beta, lower)
    prob_below_upper = beta_cdf(alpha, beta, upper)
    prob_in_range = prob_below_upper - prob_below
    prob_above = 1.0 - prob_below_upper

    ladder = config.evidence_ladder
    grade = ladder.grade_for(prob_below)
    if grade is not None:
        detailed = _OVER[grade]
    else:
        grade = ladder.grade_for(prob_above)
        if grade is not None:
            detailed = _UNDER[grade]
        else:
            detailed = DetailedStatus(config.calibration_banding.status_for(prob_in_range))
    return BucketAssessment.classified(detailed, prob_below, prob_in_range, prob_above)
