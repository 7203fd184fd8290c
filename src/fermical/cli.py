"""Command line interface for assessing confidence calibration."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config import default_config
from .labels import confidence_label, detailed_label, overall_summary
from .pipeline import OUTPUT_FORMATS, run_assessment
from .utils import PipelineError, setup_logging

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fermical", description="Assess confidence calibration from per-bucket answer tallies"
    )
    parser.add_argument("tallies", type=Path, help="Path to CSV with Confidence, Count, Correct_Count")
    parser.add_argument("--output", type=Path, help="Path to write the per-bucket breakdown")
    parser.add_argument("--format", dest="fmt", default="csv", choices=OUTPUT_FORMATS, help="Output file format")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Console logging level",
    )
    parser.add_argument("--log-file", type=Path, help="Also write DEBUG logs to this file")
    parser.add_argument("--quiet", action="store_true", help="Only log errors to the console")
    parser.add_argument("--version", action="version", version=f"%(prog)s {default_config().version}")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file, quiet=args.quiet)
    try:
        overall = run_assessment(args.tallies, output=args.output, fmt=args.fmt)
    except (ValueError, PipelineError, OSError) as exc:
        logger.error("Assessment failed: %s", exc)
        return 1

    summary = overall_summary(overall.status)
    print(f"Overall: {summary.label}")
    print(summary.description)
    for entry in overall.bucket_statuses:
        print(
            f"  {confidence_label(entry.confidence):>8}  {entry.correct_count}/{entry.count}  "
            f"{detailed_label(entry.detailed_status)}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
