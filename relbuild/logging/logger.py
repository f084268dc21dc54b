# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for relbuild.

Every log entry is one JSON line, timestamped, leveled, and tagged with the
source module. Human-only text logs and print() are both avoided.

How this works:
  - We use Python's standard `logging` module under the hood, but replace the
    default formatter with JsonFormatter, which serializes every log record
    into a single JSON line.
  - Logs go to stderr. Stdout belongs to trunk and cargo, whose output is
    streamed to the operator untouched.
  - The factory function `get_logger` is the only way to create loggers.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "relbuild.pipeline.orchestrator", "msg": "Step finished", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

_PACKAGE_PREFIX = "relbuild"

# Internal LogRecord attributes that never go into the JSON object.
_STANDARD_ATTRS: frozenset[str] = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "relativeCreated",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "pathname",
    "filename",
    "module",
    "levelno",
    "levelname",
    "processName",
    "process",
    "threadName",
    "thread",
    "message",
    "msecs",
    "taskName",
})


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Each log entry contains four mandatory fields:
      ts     — ISO 8601 UTC timestamp
      level  — log level name
      module — the logger name (usually the Python module path)
      msg    — the formatted message string

    If the log call includes `extra` keyword args, those get merged into the
    JSON object as additional context fields. This is how the pipeline attaches
    step names, exit codes and timings.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create a structured JSON logger.

    Every module should call this once at the top and use the returned
    logger instance.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stderr and the file.

    Returns:
        A configured logging.Logger that outputs structured JSON.
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level)
    logger.setLevel(level)

    # Avoid stacking handlers if get_logger is called multiple times for the
    # same name (happens in tests).
    if logger.handlers:
        return logger

    formatter = JsonFormatter()

    stream_handler = logging.StreamHandler(stream=sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file is not None:
        _attach_file_handler(logger, log_file, formatter)

    # Don't propagate to root logger — we handle all output ourselves.
    logger.propagate = False

    return logger


def _attach_file_handler(
    logger: logging.Logger, log_file: Path, formatter: logging.Formatter
) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


def configure_package_logging(log_level: str, log_file: Optional[Path] = None) -> None:
    """
    Re-level every relbuild logger created so far and optionally tee them to a file.

    Module loggers are created at import time with the default level, before
    the CLI knows what the operator asked for. The CLI calls this once the
    level and log file are resolved.
    """
    level = _resolve_log_level(log_level)
    for name in list(logging.Logger.manager.loggerDict):
        if name != _PACKAGE_PREFIX and not name.startswith(_PACKAGE_PREFIX + "."):
            continue
        logger = logging.getLogger(name)
        if not logger.handlers:
            continue
        logger.setLevel(level)
        if log_file is not None and not any(
            isinstance(h, logging.FileHandler) for h in logger.handlers
        ):
            _attach_file_handler(logger, log_file, JsonFormatter())
