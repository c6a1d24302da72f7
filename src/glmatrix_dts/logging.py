"""Structured logging helpers for the declaration builder.

Library modules obtain loggers through :func:`get_logger`, which attaches a
``NullHandler`` and wraps the logger in a :class:`LoggerAdapter` that injects
``operation`` and ``status`` fields. Handlers are configured once at the
application boundary through :func:`setup_logging`.

Examples
--------
>>> from glmatrix_dts.logging import get_logger, with_fields
>>> logger = get_logger(__name__)
>>> adapter = with_fields(logger, operation="extract", klass="vec2")
>>> adapter.debug("Extracted signatures", extra={"count": 3})
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping, MutableMapping
from typing import IO, Any

__all__ = [
    "JsonFormatter",
    "LoggerAdapter",
    "get_logger",
    "setup_logging",
    "with_fields",
]

_STRUCTURED_FIELDS = ("operation", "status", "klass", "method", "count", "duration_ms")

_STANDARD_ATTRIBUTES = frozenset(
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


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    The payload contains the timestamp, level, logger name and message plus
    every JSON-compatible extra field attached to the record.
    """

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for field in _STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value
        for key, value in record.__dict__.items():
            if (
                key not in _STANDARD_ATTRIBUTES
                and key not in data
                and not key.startswith("_")
                and isinstance(value, (str, int, float, bool, list, dict))
            ):
                data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class LoggerAdapter(logging.LoggerAdapter[logging.Logger]):
    """Logger adapter that merges bound fields into every record.

    Fields bound at construction never override fields passed explicitly via
    ``extra``. ``operation`` and ``status`` are always present on emitted
    records.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = kwargs.setdefault("extra", {})
        if isinstance(self.extra, Mapping):
            for key, value in self.extra.items():
                extra.setdefault(key, value)
        extra.setdefault("operation", "unknown")
        extra.setdefault("status", "in_progress")
        return msg, kwargs


def get_logger(name: str) -> LoggerAdapter:
    """Return a structured logger adapter for ``name``.

    Parameters
    ----------
    name : str
        Logger name, typically ``__name__``.

    Returns
    -------
    LoggerAdapter
        Adapter injecting structured fields into every record.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return LoggerAdapter(logger, {})


def with_fields(logger: logging.Logger | LoggerAdapter, **fields: object) -> LoggerAdapter:
    """Return an adapter bound to ``fields`` on top of ``logger``."""
    if isinstance(logger, LoggerAdapter):
        base_logger = logger.logger
        merged: dict[str, object] = dict(logger.extra or {})
    else:
        base_logger = logger
        merged = {}
    merged.update(fields)
    return LoggerAdapter(base_logger, merged)


def setup_logging(
    level: int | str = logging.WARNING,
    *,
    json_output: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Configure the root logger once at the application boundary.

    Parameters
    ----------
    level : int | str, optional
        Threshold level, either numeric or a level name. Defaults to WARNING.
    json_output : bool, optional
        Emit :class:`JsonFormatter` records instead of plain text. Defaults to False.
    stream : IO[str] | None, optional
        Destination stream. Defaults to ``sys.stderr`` so stdout stays free for
        generated declarations.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, handlers=[handler], force=True)
