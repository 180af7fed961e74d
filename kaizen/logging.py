"""
Structured Logging — JSON Output for Production

Configures Python logging to emit structured JSON logs.
Each log entry includes timestamp, level, module, and
any whitelisted context fields.

Usage:
    from kaizen.logging import get_logger
    logger = get_logger("composer")
    logger.info("Input rejected", extra={"field": "topic", "verdict": "gibberish"})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone


LOG_LEVEL = os.getenv("KAIZEN_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("KAIZEN_LOG_FORMAT", "json")  # "json" or "text"

# Never add raw user text here; topics and instructions stay out of logs.
_EXTRA_FIELDS = (
    "channel", "verdict", "field", "action", "tone", "length",
    "gibberish_rules", "injection_triggers", "cached", "model",
    "error", "error_type", "duration_ms", "status_code", "method",
    "path", "client",
)


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format for development. Screening context is appended
    as key=value pairs, e.g. `Input rejected  field=topic verdict=gibberish`."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = " ".join(
            f"{key}={getattr(record, key)}"
            for key in ("field", "channel", "verdict", "action")
            if getattr(record, key, None) is not None
        )
        return f"{line}  {context}" if context else line


def setup_logging():
    """Configure the kaizen logger. Call once at app startup."""
    root = logging.getLogger("kaizen")
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if LOG_FORMAT == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the kaizen namespace."""
    return logging.getLogger(f"kaizen.{name}")
