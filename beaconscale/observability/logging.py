"""
Structured Logging: Keyword Fields and Run-Scoped Correlation

Every analysis run tags its records with a run_id (and optionally the
scenario name) through a context variable, so concurrent runs in one
process stay distinguishable:

    with StructuredLogger.context(run_id="3f2a9c"):
        logger.info("Binding constraint found", component="Database Connection Pool")

Output:
- JsonFormatter: one JSON object per record, run fields and extras merged
- KeyValueFormatter: human-readable line with trailing key=value pairs

The library never installs handlers on import; applications opt in with
setup_logging().
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Iterator, Optional, TextIO


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


_run_fields: ContextVar[dict[str, Any]] = ContextVar("beaconscale_run_fields", default={})

# Attributes every stdlib LogRecord carries; anything else is a caller field
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Caller-supplied fields attached to a record, in insertion order."""
    return {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "@timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(record_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class KeyValueFormatter(logging.Formatter):
    """Plain text with the structured fields appended as key=value."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in fields.items())
        return f"{line} | {pairs}"


class StructuredLogger:
    """
    Thin wrapper over logging.Logger that takes fields as keyword arguments.

    Active run fields are merged into every record; explicit keyword
    arguments win over them.
    """

    __slots__ = ("_logger", "_bound")

    def __init__(self, name: str, **bound: Any) -> None:
        self._logger = logging.getLogger(name)
        self._bound = bound

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, message: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit(logging.ERROR, message, fields)

    def _emit(self, level: int, message: str, fields: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, message, extra={**_run_fields.get(), **self._bound, **fields})

    def with_extra(self, **fields: Any) -> StructuredLogger:
        """Child logger that adds `fields` to every record."""
        return StructuredLogger(self._logger.name, **{**self._bound, **fields})

    @staticmethod
    @contextmanager
    def context(**fields: Any) -> Iterator[dict[str, Any]]:
        """Attach fields to every record emitted inside the block."""
        merged = {**_run_fields.get(), **fields}
        token = _run_fields.set(merged)
        try:
            yield merged
        finally:
            _run_fields.reset(token)


def current_context() -> dict[str, Any]:
    return dict(_run_fields.get())


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Route all records to one stream handler on the root logger.

    Args:
        level: Minimum level for the root logger and handler
        json_output: JsonFormatter when True, KeyValueFormatter otherwise
        stream: Destination, stderr by default
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if json_output else KeyValueFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
