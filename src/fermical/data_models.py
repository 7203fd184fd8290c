"""Core data structures for calibration assessment."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from .utils import CalibrationInputError, to_percent, validate_counts


class SimpleStatus(str, Enum):
    WELL_CALIBRATED = "well-calibrated"
    OVERCONFIDENT = "overconfident"
    UNDERCONFIDENT = "underconfident"
    INSUFFICIENT_DATA = "insufficient-data"


class DetailedStatus(str, Enum):
    DECISIVE_OVERCONFIDENCE = "decisive-overconfidence"
    VERY_STRONG_OVERCONFIDENCE = "very-strong-overconfidence"
    STRONG_OVERCONFIDENCE = "strong-overconfidence"
    MODERATE_OVERCONFIDENCE = "moderate-overconfidence"
    SLIGHT_OVERCONFIDENCE = "slight-overconfidence"
    DECISIVE_UNDERCONFIDENCE = "decisive-underconfidence"
    VERY_STRONG_UNDERCONFIDENCE = "very-strong-underconfidence"
    STRONG_UNDERCONFIDENCE = "strong-underconfidence"
    MODERATE_UNDERCONFIDENCE = "moderate-underconfidence"
    SLIGHT_UNDERCONFIDENCE = "slight-underconfidence"
    GOOD_CALIBRATION = "good-calibration"
    SLIGHT_GOOD_CALIBRATION = "slight-good-calibration"
    NO_MISCALIBRATION_EVIDENCE = "no-miscalibration-evidence"
    INSUFFICIENT_DATA = "insufficient-data"

    @property
    def simple(self) -> SimpleStatus:
        if self.value.endswith("-overconfidence"):
            return SimpleStatus.OVERCONFIDENT
        if self.value.endswith("-underconfidence"):
            return SimpleStatus.UNDERCONFIDENT
        if self is DetailedStatus.INSUFFICIENT_DATA:
            return SimpleStatus.INSUFFICIENT_DATA
        return SimpleStatus.WELL_CALIBRATED


@dataclass(frozen=True)
class BucketObservation:
    confidence_level: int
    successes: int
    total: int

    def __post_init__(self) -> None:
        validate_counts(self.successes, self.total)


@dataclass(frozen=True)
class CalibrationDataPoint:
    """Answer tally for one confidence bucket as supplied by the caller."""

    confidence: int
    count: int
    correct_count: int

    def __post_init__(self) -> None:
        try:
            validate_counts(self.correct_count, self.count)
        except CalibrationInputError as exc:
            raise CalibrationInputError(f"bucket {self.confidence}: {exc}") from exc

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "CalibrationDataPoint":
        correct_key = "correctCount" if "correctCount" in data else "correct_count"
        label = data.get("confidence", "?")
        try:
            return cls(
                confidence=data["confidence"],
                count=data["count"],
                correct_count=data[correct_key],
            )
        except KeyError as exc:
            raise CalibrationInputError(f"bucket {label}: missing {exc.args[0]}") from exc

    @property
    def expected_accuracy(self) -> int:
        return self.confidence

    @property
    def actual_accuracy(self) -> Optional[int]:
        if self.count == 0:
            return None
        return to_percent(self.correct_count / self.count)

    def observation(self) -> BucketObservation:
        return BucketObservation(self.confidence, self.correct_count, self.count)


@dataclass(frozen=True)
class BucketAssessment:
    status: SimpleStatus
    detailed_status: DetailedStatus
    prob_below: float = 0.0
    prob_in_range: float = 0.0
    prob_above: float = 0.0

    @classmethod
    def insufficient(cls) -> "BucketAssessment":
        return cls(SimpleStatus.INSUFFICIENT_DATA, DetailedStatus.INSUFFICIENT_DATA)

    @classmethod
    def classified(
        cls,
        detailed_status: DetailedStatus,
        prob_below: float,
        prob_in_range: float,
        prob_above: float,
    ) -> "BucketAssessment":
        return cls(detailed_status.simple, detailed_status, prob_below, prob_in_range, prob_above)


@dataclass(frozen=True)
class BucketStatusEntry:
    """Per-bucket verdict for display, probabilities in whole percent."""

    confidence: int
    status: SimpleStatus
    detailed_status: DetailedStatus
    prob_below: int
    prob_in_range: int
    prob_above: int
    count: int
    correct_count: int
    expected_accuracy: int
    actual_accuracy: Optional[int]
    credible_interval: Tuple[int, int]

    def as_dict(self) -> Dict[str, object]:
        return {
            "Confidence": self.confidence,
            "Status": self.status.value,
            "Detailed_Status": self.detailed_status.value,
            "Prob_Below": self.prob_below,
            "Prob_In_Range": self.prob_in_range,
            "Prob_Above": self.prob_above,
            "Count": self.count,
            "Correct_Count": self.correct_count,
            "Expected_Accuracy": self.expected_accuracy,
            "Actual_Accuracy": "" if self.actual_accuracy is None else self.actual_accuracy,
            "Interval_Low": self.credible_interval[0],
            "Interval_High": self.credible_interval[1],
        }


@dataclass(frozen=True)
class OverallAssessment:
    status: SimpleStatus
    bucket_statuses: List[BucketStatusEntry] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "status": self.status.value,
            "buckets": [entry.as_dict() for entry in self.bucket_statuses],
        }
