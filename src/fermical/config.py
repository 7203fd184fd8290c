"""Configuration models and defaults for calibration assessment."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class ConfidenceRange:
    """Declared-confidence interval in whole percent."""

    lower: int
    upper: int

    def fractions(self) -> Tuple[float, float]:
        return self.lower / 100, self.upper / 100

    def label(self) -> str:
        return f"{self.lower}-{self.upper}%"


@dataclass(frozen=True)
class EvidenceLadder:
    """Cutoffs for grading a one-sided posterior tail probability."""

    decisive: float = 0.99
    very_strong: float = 0.97
    strong: float = 0.91
    moderate: float = 0.75

    def grade_for(self, probability: float) -> Optional[str]:
        if probability > self.decisive:
            return "decisive"
        if probability > self.very_strong:
            return "very-strong"
        if probability > self.strong:
            return "strong"
        if probability > self.moderate:
            return "moderate"
        return None


@dataclass(frozen=True)
class CalibrationBanding:
    """Thresholds on the in-range posterior mass."""

    good: float = 0.75
    slight: float = 0.50

    def status_for(self, prob_in_range: float) -> str:
        if prob_in_range > self.good:
            return "good-calibration"
        if prob_in_range > self.slight:
            return "slight-good-calibration"
        return "no-miscalibration-evidence"


DEFAULT_CONFIDENCE_RANGES: Dict[int, ConfidenceRange] = {
    10: ConfidenceRange(0, 20),
    30: ConfidenceRange(20, 40),
    50: ConfidenceRange(40, 60),
    70: ConfidenceRange(60, 80),
    90: ConfidenceRange(80, 100),
}

# Extreme buckets separate faster, so they need fewer answers.
DEFAULT_MIN_SAMPLES: Dict[int, int] = {
    10: 2,
    30: 3,
    50: 4,
    70: 3,
    90: 2,
}


@dataclass(frozen=True)
class Config:
    """Runtime configuration for calibration assessment."""

    confidence_ranges: Dict[int, ConfidenceRange] = field(default_factory=dict)
    min_samples: Dict[int, int] = field(default_factory=dict)
    evidence_ladder: EvidenceLadder = field(default_factory=EvidenceLadder)
    calibration_banding: CalibrationBanding = field(default_factory=CalibrationBanding)
    overall_threshold: float = 0.40
    min_total_answers: int = 3
    credible_mass: float = 0.90
    version: str = "1.0.0"

    @property
    def confidence_levels(self) -> Tuple[int, ...]:
        return tuple(sorted(self.confidence_ranges))

    def range_for(self, level: int) -> Optional[ConfidenceRange]:
        return self.confidence_ranges.get(level)

    def min_samples_for(self, level: int) -> Optional[int]:
        return self.min_samples.get(level)


def default_config() -> Config:
    return Config(
        confidence_ranges=dict(DEFAULT_CONFIDENCE_RANGES),
        min_samples=dict(DEFAULT_MIN_SAMPLES),
    )
