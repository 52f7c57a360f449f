"""Logging configuration utilities for animerge.

Provides centralized logging configuration with:
- Output to stdout or a file
- Plain text or structured JSON records
- Bake-context loggers (timeline, rig, track, binding) via LoggerAdapter
- A timing decorator for the bake pipeline
"""

from __future__ import annotations

import functools
import json
import logging
import sys
import time
from collections.abc import MutableMapping
from datetime import UTC, datetime
from typing import Any

# Record attributes that identify what is being baked. The JSON formatter
# groups them under context["bake"].
BAKE_CONTEXT_KEYS = ("timeline", "rig", "track", "binding")

# Attributes every LogRecord carries; anything else came in through `extra`.
_STANDARD_RECORD_ATTRS = frozenset(
    {
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
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class StructuredJSONFormatter(logging.Formatter):
    """Formatter that emits one JSON object per record.

    Format:
    {
        "level": "INFO",
        "message": "...",
        "timestamp": "2026-01-29T12:00:00.000000+00:00",
        "context": {
            "logger_name": "...", "module": "...", "line": 42, ...,
            "bake": {"rig": "Hero", "binding": "Hips|transform|localPosition.x"}
        }
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON.

        Args:
            record: LogRecord to format

        Returns:
            JSON-formatted log string
        """
        context: dict[str, Any] = {
            "logger_name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            context["error_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            context["error_message"] = str(record.exc_info[1]) if record.exc_info[1] else None
            context["stack_trace"] = record.exc_text or self.formatException(record.exc_info)

        bake: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_RECORD_ATTRS or key.startswith("_"):
                continue
            if key in BAKE_CONTEXT_KEYS:
                bake[key] = value
            else:
                context[key] = value
        if bake:
            context["bake"] = {key: bake[key] for key in BAKE_CONTEXT_KEYS if key in bake}

        log_entry = {
            "level": record.levelname,
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "context": context,
        }
        return json.dumps(log_entry, default=str)


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Configure application-wide logging.

    Can be called multiple times; later calls replace earlier handlers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Case-insensitive.
        format_string: Custom format string for text output.
                      Ignored if structured=True.
        filename: Path to log file. If None, logs to stdout.
        structured: If True, emit JSON records.

    Examples:
        >>> configure_logging(level="DEBUG")
        >>> configure_logging(level="INFO", structured=True, filename="bake.jsonl")
    """
    handler: logging.Handler
    if filename:
        handler = logging.FileHandler(filename)
    else:
        handler = logging.StreamHandler(sys.stdout)

    formatter: logging.Formatter
    if structured:
        formatter = StructuredJSONFormatter()
    else:
        if format_string is None:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        formatter = logging.Formatter(format_string)

    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )


def get_bake_logger() -> logging.Logger:
    """Get the logger used for pipeline timings."""
    return logging.getLogger("ANIMERGE_BAKE")


class BakeLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that tags records with the bake they belong to.

    The adapter's context (usually timeline and rig) is merged with the
    ``extra`` of each call, so per-binding fields can be added where they
    are known. Text output gets a ``[timeline/rig]`` prefix.

    Example:
        >>> log = get_logger(__name__, timeline="Intro", rig="Hero")
        >>> log.warning("Skipped binding", extra={"binding": "Hips|transform|localPosition.x"})
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, Any]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        scope = "/".join(str(extra[key]) for key in ("timeline", "rig") if extra.get(key))
        if scope:
            msg = f"[{scope}] {msg}"
        return msg, kwargs


def get_logger(name: str, **kwargs: Any) -> logging.Logger | logging.LoggerAdapter:
    """Get a logger, wrapped in a BakeLoggerAdapter when context is given.

    Args:
        name: Logger name (usually __name__ from the calling module)
        **kwargs: Context to attach to every record (e.g. rig="Hero").
            None values are dropped.

    Returns:
        Logger instance, or LoggerAdapter if context provided
    """
    logger = logging.getLogger(name)
    context = {key: value for key, value in kwargs.items() if value is not None}
    if context:
        return BakeLoggerAdapter(logger, context)
    return logger


def log_performance(func):
    """Log the wall time of each call on the bake logger.

    The record carries ``operation`` and ``duration_s`` fields for the JSON
    formatter.
    """

    @functools.wraps(func)
    def wrapper_timer(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        execution_time = time.perf_counter() - start_time
        get_bake_logger().debug(
            f"Function {func.__name__!r} took {execution_time:.4f} seconds to execute.",
            extra={"operation": func.__qualname__, "duration_s": round(execution_time, 6)},
        )
        return result

    return wrapper_timer
