"""Combine per-bucket assessments into an overall calibration verdict."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from .calculations import assess_bucket, posterior_interval
from .config import Config, default_config
from .data_models import (
    BucketAssessment,
    BucketStatusEntry,
    CalibrationDataPoint,
    OverallAssessment,
    SimpleStatus,
)
from .utils import to_percent

BucketInput = Union[CalibrationDataPoint, Mapping[str, object]]


@dataclass
class VoteTally:
    """Evidence-weighted votes, each bucket weighted by its answer count."""

    total_weight: int = 0
    overconfident_weight: float = 0.0
    underconfident_weight: float = 0.0

    def add(self, weight: int, assessment: BucketAssessment) -> None:
        self.total_weight += weight
        if assessment.status is SimpleStatus.OVERCONFIDENT:
            self.overconfident_weight += weight * assessment.prob_below
        elif assessment.status is SimpleStatus.UNDERCONFIDENT:
            self.underconfident_weight += weight * assessment.prob_above

    def normalized(self) -> Tuple[float, float]:
        if not self.total_weight:
            return 0.0, 0.0
        return (
            self.overconfident_weight / self.total_weight,
            self.underconfident_weight / self.total_weight,
        )

    def verdict(self, threshold: float) -> SimpleStatus:
        over, under = self.normalized()
        if over > threshold and over > under:
            return SimpleStatus.OVERCONFIDENT
        if under > threshold and under > over:
            return SimpleStatus.UNDERCONFIDENT
        return SimpleStatus.WELL_CALIBRATED


def _coerce(bucket: BucketInput) -> CalibrationDataPoint:
    if isinstance(bucket, CalibrationDataPoint):
        return bucket
    return CalibrationDataPoint.from_mapping(bucket)


def _with_data(buckets: Iterable[BucketInput]) -> List[CalibrationDataPoint]:
    points = [_coerce(bucket) for bucket in buckets]
    return sorted((point for point in points if point.count >= 1), key=lambda p: p.confidence)


def _status_entry(
    point: CalibrationDataPoint, assessment: BucketAssessment, config: Config
) -> BucketStatusEntry:
    low, high = posterior_interval(point.correct_count, point.count, config.credible_mass)
    return BucketStatusEntry(
        confidence=point.confidence,
        status=assessment.status,
        detailed_status=assessment.detailed_status,
        prob_below=to_percent(assessment.prob_below),
        prob_in_range=to_percent(assessment.prob_in_range),
        prob_above=to_percent(assessment.prob_above),
        count=point.count,
        correct_count=point.correct_count,
        expected_accuracy=point.expected_accuracy,
        actual_accuracy=point.actual_accuracy,
        credible_interval=(to_percent(low), to_percent(high)),
    )


def _assess(point: CalibrationDataPoint, config: Config) -> BucketAssessment:
    observation = point.observation()
    return assess_bucket(
        observation.successes, observation.total, observation.confidence_level, config
    )


def assess_all_buckets(
    buckets: Iterable[BucketInput], config: Optional[Config] = None
) -> List[BucketStatusEntry]:
    """Assess every bucket that has answers, ordered by confidence level."""
    config = config or default_config()
    return [_status_entry(point, _assess(point, config), config) for point in _with_data(buckets)]


def assess_overall_calibration(
    buckets: Iterable[BucketInput], config: Optional[Config] = None
) -> OverallAssessment:
    """Weighted vote across buckets.

    Overconfident buckets vote with ``count * prob_below`` and underconfident
    ones with ``count * prob_above``; both sums are normalised by the total
    answer count. A side wins when its share exceeds
    ``config.overall_threshold`` and the opposing share. Fewer than
    ``config.min_total_answers`` answers gives ``insufficient-data`` with an
    empty breakdown.
    """
    config = config or default_config()
    points = _with_data(buckets)
    if not points or sum(point.count for point in points) < config.min_total_answers:
        return OverallAssessment(SimpleStatus.INSUFFICIENT_DATA, [])

    tally = VoteTally()
    entries: List[BucketStatusEntry] = []
    for point in points:
        assessment = _assess(point, config)
        tally.add(point.count, assessment)
        entries.append(_status_entry(point, assessment, config))
    return OverallAssessment(tally.verdict(config.overall_threshold), entries)
