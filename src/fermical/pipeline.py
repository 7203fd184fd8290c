"""High level orchestration: load tallies, assess, write the breakdown."""
from __future__ import annotations

import csv
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from .aggregation import assess_all_buckets, assess_overall_calibration
from .config import Config, default_config
from .data_models import BucketStatusEntry, OverallAssessment, SimpleStatus
from .loader import read_tallies
from .utils import PipelineError

logger = logging.getLogger(__name__)


OUTPUT_HEADERS = [
    "Confidence",
    "Status",
    "Detailed_Status",
    "Prob_Below",
    "Prob_In_Range",
    "Prob_Above",
    "Count",
    "Correct_Count",
    "Expected_Accuracy",
    "Actual_Accuracy",
    "Interval_Low",
    "Interval_High",
]

OUTPUT_FORMATS = ("csv", "json")


class OutputWriter:
    def __init__(self, output_path: Path, fmt: str = "csv"):
        if fmt not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format '{fmt}'")
        self.output_path = output_path
        self.fmt = fmt

    def _write_csv(self, handle, entries: List[BucketStatusEntry]) -> None:
        writer = csv.DictWriter(handle, OUTPUT_HEADERS)
        writer.writeheader()
        for entry in entries:
            writer.writerow(entry.as_dict())

    def _write_json(
        self, handle, status: SimpleStatus, entries: List[BucketStatusEntry], version: str
    ) -> None:
        payload = {
            "status": status.value,
            "version": version,
            "buckets": [entry.as_dict() for entry in entries],
        }
        json.dump(payload, handle, indent=2, ensure_ascii=False)
        handle.write("\n")

    def write(
        self, status: SimpleStatus, entries: List[BucketStatusEntry], version: str
    ) -> None:
        output_dir = self.output_path.parent
        if output_dir and not output_dir.exists():
            output_dir.mkdir(parents=True, exist_ok=True)
        temp_file = tempfile.NamedTemporaryFile(
            "w",
            newline="",
            encoding="utf-8",
            delete=False,
            dir=output_dir or Path("."),
        )
        try:
            with temp_file:
                if self.fmt == "json":
                    self._write_json(temp_file, status, entries, version)
                else:
                    self._write_csv(temp_file, entries)
            os.replace(temp_file.name, self.output_path)
        finally:
            if os.path.exists(temp_file.name):
                os.unlink(temp_file.name)
        logger.info("Wrote %d bucket rows to %s", len(entries), self.output_path)


def run_assessment(
    tallies_csv: Path,
    output: Optional[Path] = None,
    fmt: str = "csv",
    config: Optional[Config] = None,
) -> OverallAssessment:
    config = config or default_config()
    tallies = read_tallies(tallies_csv, config)
    if not tallies:
        raise PipelineError(f"No tallies found in {tallies_csv}")
    logger.debug("Loaded %d bucket tallies from %s", len(tallies), tallies_csv)

    overall = assess_overall_calibration(tallies, config)
    entries = overall.bucket_statuses
    if overall.status is SimpleStatus.INSUFFICIENT_DATA:
        logger.warning(
            "Only %d answers across buckets; overall verdict needs %d",
            sum(t.count for t in tallies),
            config.min_total_answers,
        )
        entries = assess_all_buckets(tallies, config)
    for entry in entries:
        logger.debug(
            "Bucket %d: %s (below=%d%% in=%d%% above=%d%%)",
            entry.confidence,
            entry.detailed_status.value,
            entry.prob_below,
            entry.prob_in_range,
            entry.prob_above,
        )
    logger.info("Overall calibration: %s", overall.status.value)

    if output is not None:
        OutputWriter(output, fmt).write(overall.status, entries, config.version)
    return OverallAssessment(overall.status, entries)
