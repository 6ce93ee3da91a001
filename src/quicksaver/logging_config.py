"""Structured logging configuration for quicksaver."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured output."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(
                record.exc_info,
            )
        return json.dumps(log_entry)


def level_for_verbosity(verbose_level: int) -> str:
    """Map the config's VerboseLevel onto a log level name.

    0 only reports problems, 1 is normal output, 2+ includes per-file detail.
    """
    if verbose_level <= 0:
        return "WARNING"
    if verbose_level == 1:
        return "INFO"
    return "DEBUG"


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """Configure logging for quicksaver.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        json_output: If True, use JSON formatter.
    """
    root = logging.getLogger("quicksaver")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)

    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root.addHandler(handler)
