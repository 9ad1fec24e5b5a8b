"""
Structured JSON logging for the payroll core.

Every logger lives under the ``payroll_kernel`` namespace.
``configure_logging`` attaches a single JSON-lines handler to that
namespace.  Each line carries the record's ``extra`` fields plus the
employee and pay period that the batch runner binds with
``LogContext.bind``.
"""

__all__ = [
    "CONTEXT_FIELDS",
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any, TextIO

_LOGGER_PREFIX = "payroll_kernel"
_HANDLER_NAME = "payroll_json"

CONTEXT_FIELDS: tuple[str, ...] = ("employee_id", "period")

_context: ContextVar[dict[str, str] | None] = ContextVar(
    "payroll_log_context", default=None
)


class LogContext:
    """Employee and pay period attached to records logged inside ``bind``."""

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_context.get() or {})

    @staticmethod
    def clear() -> None:
        _context.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """
        Add fields for the duration of the block.

        Nested binds merge with the enclosing ones; ``None`` values leave
        the enclosing value in place.  The previous context is restored on
        exit, including when the block raises.
        """
        unknown = sorted(set(fields) - set(CONTEXT_FIELDS))
        if unknown:
            raise TypeError(f"Unknown log context field(s): {', '.join(unknown)}")

        merged = LogContext.get_all()
        merged.update({k: str(v) for k, v in fields.items() if v is not None})
        token = _context.set(merged)
        try:
            yield
        finally:
            _context.reset(token)


_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(value: Any) -> Any:
    # Amounts stay exact in the log
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return repr(value)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the payroll_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Send payroll_kernel records to ``stream`` (default stderr) as JSON lines.

    Calling again only changes the level; the first stream is kept.
    """
    namespace = logging.getLogger(_LOGGER_PREFIX)
    with _lock:
        namespace.setLevel(level)
        namespace.propagate = False
        if not any(h.get_name() == _HANDLER_NAME for h in namespace.handlers):
            handler = logging.StreamHandler(stream or sys.stderr)
            handler.set_name(_HANDLER_NAME)
            handler.setFormatter(StructuredFormatter())
            namespace.addHandler(handler)
    return namespace


def reset_logging() -> None:
    """Drop the JSON handler and hand records back to the root logger. Used by tests."""
    namespace = logging.getLogger(_LOGGER_PREFIX)
    with _lock:
        for handler in list(namespace.handlers):
            if handler.get_name() == _HANDLER_NAME:
                namespace.removeHandler(handler)
        namespace.setLevel(logging.WARNING)
        namespace.propagate = True
