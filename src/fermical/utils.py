"""Utility helpers shared across the calibration package."""
from __future__ import annotations

import logging
import logging.config
import math
from numbers import Integral
from pathlib import Path
from typing import Optional


LOGGER_NAME = "fermical"


class CalibrationInputError(ValueError):
    """Raised when bucket counts are structurally invalid."""


class PipelineError(RuntimeError):
    """Raised when the assessment pipeline encounters a fatal error."""


def _require_count(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise CalibrationInputError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise CalibrationInputError(f"{name} must be non-negative, got {value}")
    return int(value)


def validate_counts(successes: object, total: object) -> tuple[int, int]:
    """Return ``(successes, total)`` as ints or raise :class:`CalibrationInputError`."""
    successes = _require_count("successes", successes)
    total = _require_count("total", total)
    if successes > total:
        raise CalibrationInputError(
            f"successes ({successes}) cannot exceed total ({total})"
        )
    return successes, total


def to_percent(probability: float) -> int:
    # half-up, so 0.125 -> 13 rather than banker's rounding
    return int(math.floor(probability * 100 + 0.5))


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    quiet: bool = False,
) -> logging.Logger:
    """Configure the ``fermical`` logger namespace.

    Console output goes to stderr; ``quiet`` restricts it to errors. When
    ``log_file`` is given every record at DEBUG and above is also written there.
    """
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "level": "ERROR" if quiet else level.upper(),
        }
    }
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "plain",
            "filename": str(log_file),
            "encoding": "utf-8",
            "mode": "a",
            "level": "DEBUG",
        }
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "{asctime} {levelname:<7} {name} - {message}",
                "style": "{",
            },
            "console": {
                "format": "{levelname:<7} {message}",
                "style": "{",
            },
        },
        "handlers": handlers,
        "loggers": {
            LOGGER_NAME: {
                "level": "DEBUG" if log_file is not None else level.upper(),
                "handlers": list(handlers),
                "propagate": False,
            },
        },
        "root": {"handlers": []},
    }
    logging.config.dictConfig(config)
    return logging.getLogger(LOGGER_NAME)
