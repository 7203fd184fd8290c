import math

import mpmath
import pytest

from fermical.calculations import (
    assess_bucket,
    beta_cdf,
    beta_incomplete,
    beta_inverse,
    log_gamma,
    posterior_interval,
    posterior_parameters,
)
from fermical.config import default_config
from fermical.data_models import DetailedStatus, SimpleStatus
from fermical.utils import CalibrationInputError


def test_log_gamma_returns_infinity_for_non_positive_arguments():
    assert log_gamma(0) == math.inf
    assert log_gamma(-1) == math.inf
    assert log_gamma(-0.5) == math.inf


@pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 6, 10])
def test_log_gamma_matches_log_factorial(n):
    assert log_gamma(n) == pytest.approx(math.log(math.factorial(n - 1)), abs=1e-5)


def test_log_gamma_reflection_region():
    assert log_gamma(0.5) == pytest.approx(math.log(math.sqrt(math.pi)), abs=1e-8)
    assert log_gamma(0.4) == pytest.approx(0.7966, abs=1e-3)
    assert log_gamma(0.6) == pytest.approx(0.3982, abs=1e-3)


@pytest.mark.parametrize("x", [0.05, 0.3, 0.75, 1.5, 7.25, 33.0, 120.0])
def test_log_gamma_agrees_with_reference(x):
    assert log_gamma(x) == pytest.approx(float(mpmath.loggamma(x)), abs=1e-7)


def test_beta_incomplete_endpoints_are_exact():
    assert beta_incomplete(2, 3, 0) == 0.0
    assert beta_incomplete(5, 5, 0) == 0.0
    assert beta_incomplete(2, 3, 1) == 1.0
    assert beta_incomplete(5, 5, 1) == 1.0


@pytest.mark.parametrize("x", [0.0, 0.1, 0.25, 0.5, 0.75, 0.9, 1.0])
def test_beta_incomplete_uniform_is_identity(x):
    assert beta_incomplete(1, 1, x) == pytest.approx(x, abs=1e-8)


@pytest.mark.parametrize("a", [0.5, 1, 2, 5, 10, 40])
def test_beta_incomplete_symmetric_midpoint(a):
    assert beta_incomplete(a, a, 0.5) == pytest.approx(0.5, abs=1e-8)


@pytest.mark.parametrize("a,b,x", [(3, 5, 0.7), (0.5, 2.5, 0.2), (11, 1, 0.8), (2, 9, 0.15)])
def test_beta_incomplete_symmetry(a, b, x):
    assert beta_incomplete(a, b, x) == pytest.approx(1 - beta_incomplete(b, a, 1 - x), abs=1e-8)


@pytest.mark.parametrize(
    "a,b,x",
    [(6, 6, 0.4), (3, 5, 0.6), (1, 11, 0.8), (21, 1, 0.8), (9, 3, 0.4), (30, 12, 0.7)],
)
def test_beta_incomplete_agrees_with_reference(a, b, x):
    expected = float(mpmath.betainc(a, b, 0, x, regularized=True))
    assert beta_incomplete(a, b, x) == pytest.approx(expected, abs=1e-8)


def test_beta_incomplete_rejects_bad_arguments():
    with pytest.raises(ValueError):
        beta_incomplete(0, 1, 0.5)
    with pytest.raises(ValueError):
        beta_incomplete(1, -2, 0.5)
    with pytest.raises(ValueError):
        beta_incomplete(1, 1, 1.5)
    with pytest.raises(ValueError):
        beta_incomplete(1, 1, float("nan"))


def test_beta_cdf_clamps_outside_unit_interval():
    assert beta_cdf(2, 3, 0) == 0.0
    assert beta_cdf(2, 3, -0.1) == 0.0
    assert beta_cdf(2, 3, 1) == 1.0
    assert beta_cdf(2, 3, 2) == 1.0
    assert beta_cdf(3, 4, 0.5) == beta_incomplete(3, 4, 0.5)


def test_beta_inverse_inverts_cdf():
    q = beta_inverse(4, 7, 0.3)
    assert beta_cdf(4, 7, q) == pytest.approx(0.3, abs=1e-7)
    assert beta_inverse(4, 7, 0.0) == 0.0
    assert beta_inverse(4, 7, 1.0) == 1.0
    with pytest.raises(ValueError):
        beta_inverse(4, 7, 1.2)


def test_posterior_parameters_use_uniform_prior():
    assert posterior_parameters(3, 10) == (4, 8)
    assert posterior_parameters(0, 0) == (1, 1)


def test_posterior_interval_for_uniform_posterior():
    low, high = posterior_interval(0, 0, mass=0.9)
    assert low == pytest.approx(0.05, abs=1e-6)
    assert high == pytest.approx(0.95, abs=1e-6)
    low, high = posterior_interval(5, 10)
    assert low + high == pytest.approx(1.0, abs=1e-6)
    assert low < 0.5 < high


@pytest.mark.parametrize("successes,total", [(-1, 3), (4, 3), (1.5, 3), (True, 3), (1, None)])
def test_assess_bucket_rejects_invalid_counts(successes, total):
    with pytest.raises(CalibrationInputError):
        assess_bucket(successes, total, 50)


def test_insufficient_data_below_bucket_minimum():
    result = assess_bucket(2, 3, 50)
    assert result.status is SimpleStatus.INSUFFICIENT_DATA
    assert result.detailed_status is DetailedStatus.INSUFFICIENT_DATA
    assert (result.prob_below, result.prob_in_range, result.prob_above) == (0, 0, 0)


@pytest.mark.parametrize("level", [10, 30, 50, 70, 90])
def test_gating_applies_regardless_of_successes(level):
    minimum = default_config().min_samples[level]
    for total in range(minimum):
        for successes in range(total + 1):
            assert assess_bucket(successes, total, level).status == "insufficient-data"
    assert assess_bucket(0, minimum, level).status != "insufficient-data"


def test_unknown_confidence_level_degrades_to_insufficient_data():
    assert assess_bucket(5, 10, 15).detailed_status == "insufficient-data"


def test_decisive_overconfidence():
    result = assess_bucket(0, 10, 90)
    assert result.status == "overconfident"
    assert result.detailed_status == "decisive-overconfidence"
    assert result.prob_below > 0.99


def test_decisive_underconfidence():
    result = assess_bucket(10, 10, 10)
    assert result.status == "underconfident"
    assert result.detailed_status == "decisive-underconfidence"
    assert result.prob_above > 0.99


@pytest.mark.parametrize(
    "successes,total,level,expected",
    [
        (0, 2, 90, "decisive-overconfidence"),
        (1, 3, 90, "very-strong-overconfidence"),
        (2, 4, 90, "strong-overconfidence"),
        (1, 2, 90, "moderate-overconfidence"),
        (2, 6, 70, "moderate-overconfidence"),
        (2, 2, 10, "decisive-underconfidence"),
        (2, 3, 10, "very-strong-underconfidence"),
        (2, 4, 10, "strong-underconfidence"),
        (1, 2, 10, "moderate-underconfidence"),
        (8, 10, 30, "decisive-underconfidence"),
        (20, 20, 90, "good-calibration"),
        (0, 20, 10, "good-calibration"),
        (5, 10, 50, "slight-good-calibration"),
        (9, 10, 90, "slight-good-calibration"),
        (4, 8, 50, "no-miscalibration-evidence"),
    ],
)
def test_detailed_status_ladder(successes, total, level, expected):
    result = assess_bucket(successes, total, level)
    assert result.detailed_status.value == expected
    assert result.status is result.detailed_status.simple


def test_well_calibrated_middle_bucket():
    assert assess_bucket(5, 10, 50).status is SimpleStatus.WELL_CALIBRATED


def test_probabilities_partition_posterior_mass():
    for successes, total, level in [(5, 10, 50), (0, 10, 90), (10, 10, 10), (3, 5, 70), (7, 12, 30)]:
        result = assess_bucket(successes, total, level)
        assert result.prob_below + result.prob_in_range + result.prob_above == pytest.approx(1, abs=1e-5)
        for value in (result.prob_below, result.prob_in_range, result.prob_above):
            assert -1e-9 <= value <= 1 + 1e-9


@pytest.mark.parametrize("level", [10, 30, 50, 70, 90])
@pytest.mark.parametrize("total", [4, 9, 25])
def test_more_successes_shift_mass_upwards(level, total):
    previous = None
    for successes in range(total + 1):
        result = assess_bucket(successes, total, level)
        if previous is not None:
            assert result.prob_above >= previous.prob_above - 1e-9
            assert result.prob_below <= previous.prob_below + 1e-9
        previous = result


def test_assessment_is_deterministic():
    assert assess_bucket(3, 7, 70) == assess_bucket(3, 7, 70)
