"""Logging setup for the weather service.

Dev runs get plain timestamped lines; containers set ``LOG_JSON=true`` and
get one JSON object per line. Cache decisions are logged with an
``extra={"cache_key": ..., "cache_tier": ...}`` mapping, and the JSON
formatter lifts those fields to top-level keys so hit/miss ratios can be
grepped out of the container logs.

Usage:
    from weatherapp.logging_config import setup_logging

    setup_logging()                         # INFO, human-readable
    setup_logging(level="DEBUG")            # DEBUG, human-readable
    setup_logging(json_format=True)         # INFO, JSON lines
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

SERVICE_NAME = "remix-weather"

# Record attributes copied into JSON output when present.
_CONTEXT_FIELDS: tuple[str, ...] = ("cache_key", "cache_tier", "upstream_status")

# Chatty third-party loggers held at WARNING unless DEBUG is requested.
_NOISY_LOGGERS: tuple[str, ...] = ("aiohttp.access", "uvicorn.access", "asyncio")


class _JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "service": SERVICE_NAME,
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


_HUMAN_FMT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Install a single stderr handler on the root logger.

    Safe to call more than once; earlier handlers are closed and replaced.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit JSON lines instead of human-readable text.

    Raises:
        ValueError: If *level* is not a recognised log level name.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r}")

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        _JSONFormatter() if json_format else logging.Formatter(_HUMAN_FMT)
    )
    root.addHandler(handler)

    quiet_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
