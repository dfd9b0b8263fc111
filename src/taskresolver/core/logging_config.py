"""Logging setup for taskresolver.

Every module logs through ``logging.getLogger(__name__)``, so all records
live under the ``taskresolver`` logger. Nothing is configured on import;
applications that want output call ``configure_logging()`` once.

Usage:
    from taskresolver.core.logging_config import configure_logging

    configure_logging(level="DEBUG", format="json")

Environment Variables:
    TASKRESOLVER_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    TASKRESOLVER_LOG_FORMAT: Output format ("text" or "json")
    TASKRESOLVER_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

PACKAGE_LOGGER = "taskresolver"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_FORMAT_WITH_MS = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Record attributes promoted to top-level JSON keys when present
CONTEXT_FIELDS = ("resolution_id", "task_id")

_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "taskName"}

_configured = False


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Outputs one JSON object per record:
    {
        "timestamp": "2026-01-04T14:30:00.123456",
        "level": "DEBUG",
        "logger": "taskresolver.core.dag.resolution",
        "message": "task_completed: task_id=fetch, ok=True",
        "resolution_id": "3f2a...",
        "task_id": "fetch",
        "extra": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {
            k: v
            for k, v in record.__dict__.items()
            if k not in _STANDARD_ATTRS and k not in CONTEXT_FIELDS
        }
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    include_ms: bool = True,
    force: bool = False,
) -> logging.Logger:
    """Attach handlers to the ``taskresolver`` logger.

    Subsequent calls are ignored unless force=True. The root logger is left
    alone; records still propagate to it.

    Args:
        level: Log level. Defaults to TASKRESOLVER_LOG_LEVEL or "WARNING".
        format: Output format. Defaults to TASKRESOLVER_LOG_FORMAT or "text".
        file_path: Optional file path. Defaults to TASKRESOLVER_LOG_FILE.
        include_ms: Include milliseconds in text timestamps.
        force: Replace handlers installed by an earlier call.

    Returns:
        The package logger.

    Raises:
        ValueError: If the level or format is unknown.
    """
    global _configured
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured and not force:
        return logger

    level = (level or os.environ.get("TASKRESOLVER_LOG_LEVEL", "WARNING")).upper()
    format = format or os.environ.get("TASKRESOLVER_LOG_FORMAT", "text")  # type: ignore[assignment]
    file_path = file_path or os.environ.get("TASKRESOLVER_LOG_FILE")

    numeric_level = _level_number(level)
    if format not in ("text", "json"):
        raise ValueError(f"Unknown log format: {format}")

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        fmt = TEXT_FORMAT_WITH_MS if include_ms else TEXT_FORMAT
        formatter = logging.Formatter(fmt, datefmt=DATE_FORMAT)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(numeric_level)
    _configured = True
    return logger


def reset_logging() -> None:
    """Remove handlers installed by configure_logging()."""
    global _configured
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    _configured = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__).

    Returns:
        The logger.
    """
    return logging.getLogger(name)


def _level_number(level: str) -> int:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric_level


def set_level(level: str, logger_name: str | None = None) -> None:
    """Set the log level of a logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        logger_name: Logger name. None for the package logger.

    Raises:
        ValueError: If the level is unknown.
    """
    logging.getLogger(logger_name or PACKAGE_LOGGER).setLevel(_level_number(level))


def add_file_handler(
    file_path: str,
    level: str = "DEBUG",
    json_format: bool = False,
    logger_name: str | None = None,
) -> logging.FileHandler:
    """Add a file handler to a logger.

    Useful for logging a single component, e.g. ``taskresolver.core.dag``,
    to its own file.

    Args:
        file_path: Path to log file.
        level: Log level for this handler.
        json_format: Use JSON format.
        logger_name: Logger name. None for the package logger.

    Returns:
        The created file handler.
    """
    logger = logging.getLogger(logger_name or PACKAGE_LOGGER)

    handler = logging.FileHandler(file_path)
    handler.setLevel(_level_number(level))

    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT_WITH_MS, datefmt=DATE_FORMAT))

    logger.addHandler(handler)
    return handler
