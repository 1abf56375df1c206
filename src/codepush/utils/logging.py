"""
Logging configuration for CodePush.

Console logging in one of two formats, chosen by ``log.format``:

- ``text``: ``[timestamp] [LEVEL   ] [logger] message``
- ``json``: one JSON object per line, including any ``extra`` fields

Usage:
    from codepush.utils.logging import get_logger, setup_logging

    setup_logging(level="debug", log_format="json")
    logger = get_logger("codepush.storage")
    logger.info("Uploaded bundle", extra={"bucket": "releases"})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from codepush.config.loader import LogConfig

# Map configured level names to logging constants
LEVEL_MAP = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

LOG_FORMATS = ("text", "json")

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(
    (
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "message",
        "thread",
        "threadName",
        "taskName",
    )
)


def _parse_level(level: str | int) -> int:
    """Parse a level name or number; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        return LEVEL_MAP.get(level.lower(), logging.INFO)
    return logging.INFO


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS and not k.startswith("_")}


class StructuredFormatter(logging.Formatter):
    """JSON-formatted log formatter with structured fields."""

    def __init__(self, extra_fields: dict[str, Any] | None = None):
        super().__init__()
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        log_data.update(_extra_fields(record))
        log_data.update(self.extra_fields)

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Human-readable formatter.

    Format: [timestamp] [level] [logger] message key=value ...
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        parts = [f"[{timestamp}]", f"[{level}]", f"[{record.name}]", record.getMessage()]

        extra = _extra_fields(record)
        if extra:
            parts.append(" ".join(f"{k}={v}" for k, v in extra.items()))

        message = " ".join(parts)

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging(
    level: str | int = "info",
    log_format: str = "text",
    stream: Any = None,
    extra_fields: dict[str, Any] | None = None,
) -> logging.Logger:
    """
    Setup console logging for CodePush.

    Args:
        level: Log level (error, warn, info, debug) or a logging constant
        log_format: ``text`` or ``json``; anything else is treated as text
        stream: Output stream (defaults to sys.stderr)
        extra_fields: Extra fields to include in every JSON log line

    Returns:
        The ``codepush`` logger
    """
    level_int = _parse_level(level)
    logger = logging.getLogger("codepush")

    # Remove existing handlers to avoid duplicates when reconfigured
    logger.handlers.clear()
    logger.setLevel(level_int)

    formatter: logging.Formatter
    if log_format == "json":
        formatter = StructuredFormatter(extra_fields=extra_fields)
    else:
        formatter = HumanReadableFormatter()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level_int)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def setup_logging_from_config(log_config: LogConfig, stream: Any = None) -> logging.Logger:
    """Setup logging from the ``log`` section of a resolved configuration."""
    return setup_logging(level=log_config.level, log_format=log_config.format, stream=stream)


def get_logger(name: str = "codepush") -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (default: "codepush")

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
