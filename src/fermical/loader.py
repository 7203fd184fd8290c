"""Loading and parsing utilities for confidence-bucket tallies."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Optional

from .config import Config, default_config
from .data_models import CalibrationDataPoint
from .utils import CalibrationInputError


REQUIRED_COLUMNS = {"Confidence", "Count", "Correct_Count"}


def _parse_int(value: Optional[str]) -> int:
    text = (value or "").strip()
    if not text:
        raise ValueError("blank value")
    return int(text)


def parse_tallies(
    rows: Iterable[dict], config: Optional[Config] = None
) -> List[CalibrationDataPoint]:
    config = config or default_config()
    tallies: List[CalibrationDataPoint] = []
    seen: set[int] = set()
    for idx, row in enumerate(rows, start=2):
        try:
            confidence = _parse_int(row.get("Confidence"))
        except ValueError as exc:
            raise ValueError(f"Row {idx}: invalid Confidence '{row.get('Confidence')}'") from exc
        if config.range_for(confidence) is None:
            raise ValueError(
                f"Row {idx}: unknown confidence level {confidence}; "
                f"expected one of {list(config.confidence_levels)}"
            )
        if confidence in seen:
            raise ValueError(f"Row {idx}: duplicate confidence level {confidence}")
        seen.add(confidence)
        try:
            count = _parse_int(row.get("Count"))
            correct_count = _parse_int(row.get("Correct_Count"))
        except ValueError as exc:
            raise ValueError(f"Row {idx}: invalid numeric tally values") from exc
        try:
            tallies.append(CalibrationDataPoint(confidence, count, correct_count))
        except CalibrationInputError as exc:
            raise ValueError(f"Row {idx}: {exc}") from exc
    return tallies


def read_tallies(csv_path: Path, config: Optional[Config] = None) -> List[CalibrationDataPoint]:
    with csv_path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        missing = REQUIRED_COLUMNS.difference(reader.fieldnames or [])
        if missing:
            raise ValueError(f"Tallies file missing columns: {sorted(missing)}")
        return parse_tallies(reader, config)
