"""Human-readable labels for calibration statuses and confidence buckets."""
from __future__ import annotations

from typing import Dict, NamedTuple

from .config import DEFAULT_CONFIDENCE_RANGES
from .data_models import DetailedStatus, SimpleStatus


class StatusSummary(NamedTuple):
    label: str
    description: str


DETAILED_STATUS_LABELS: Dict[DetailedStatus, str] = {
    DetailedStatus.DECISIVE_OVERCONFIDENCE: "Decisive evidence for overconfidence",
    DetailedStatus.VERY_STRONG_OVERCONFIDENCE: "Very strong evidence for overconfidence",
    DetailedStatus.STRONG_OVERCONFIDENCE: "Strong evidence for overconfidence",
    DetailedStatus.MODERATE_OVERCONFIDENCE: "Substantial evidence for overconfidence",
    DetailedStatus.SLIGHT_OVERCONFIDENCE: "Slight evidence for overconfidence",
    DetailedStatus.DECISIVE_UNDERCONFIDENCE: "Decisive evidence for underconfidence",
    DetailedStatus.VERY_STRONG_UNDERCONFIDENCE: "Very strong evidence for underconfidence",
    DetailedStatus.STRONG_UNDERCONFIDENCE: "Strong evidence for underconfidence",
    DetailedStatus.MODERATE_UNDERCONFIDENCE: "Substantial evidence for underconfidence",
    DetailedStatus.SLIGHT_UNDERCONFIDENCE: "Slight evidence for underconfidence",
    DetailedStatus.GOOD_CALIBRATION: "Evidence for good calibration",
    DetailedStatus.SLIGHT_GOOD_CALIBRATION: "Some evidence for good calibration",
    DetailedStatus.NO_MISCALIBRATION_EVIDENCE: "No evidence of miscalibration",
    DetailedStatus.INSUFFICIENT_DATA: "Insufficient data",
}

SIMPLE_STATUS_SUMMARIES: Dict[SimpleStatus, StatusSummary] = {
    SimpleStatus.WELL_CALIBRATED: StatusSummary(
        "Well Calibrated",
        "Your confidence levels closely match your actual accuracy. Great calibration!",
    ),
    SimpleStatus.OVERCONFIDENT: StatusSummary(
        "Overconfident",
        "You tend to be more confident than your accuracy warrants. "
        "Consider being more conservative with high confidence ratings.",
    ),
    SimpleStatus.UNDERCONFIDENT: StatusSummary(
        "Underconfident",
        "You're actually more accurate than your confidence suggests. "
        "You can trust your estimates more!",
    ),
    SimpleStatus.INSUFFICIENT_DATA: StatusSummary(
        "Insufficient Data",
        "Not enough answers at different confidence levels to determine calibration.",
    ),
}


def detailed_label(status: DetailedStatus) -> str:
    return DETAILED_STATUS_LABELS[DetailedStatus(status)]


def overall_summary(status: SimpleStatus) -> StatusSummary:
    return SIMPLE_STATUS_SUMMARIES[SimpleStatus(status)]


def confidence_label(level: int) -> str:
    confidence_range = DEFAULT_CONFIDENCE_RANGES.get(level)
    if confidence_range is None:
        return f"{level}%"
    return confidence_range.label()
