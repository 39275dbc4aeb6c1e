"""
Structured JSON logging for the reporting pipeline.

Every record under the ``ifrs_reporting`` logger is written as one JSON
object: timestamp, level, logger name, the snake_case event message, the
fields bound in LogContext for the current generation call, any ``extra``
fields, and, for exceptions, the type, message, ``code`` and the public
attributes of ReportingError subclasses.
"""

__all__ = [
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
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any
from uuid import UUID

ROOT_LOGGER_NAME = "ifrs_reporting"

CONTEXT_FIELDS = ("correlation_id", "company_id", "statement_type", "period_end")

_EMPTY: Mapping[str, str] = MappingProxyType({})
_context: ContextVar[Mapping[str, str]] = ContextVar("ifrs_log_context", default=_EMPTY)


def _checked(fields: Mapping[str, str | None]) -> dict[str, str]:
    unknown = [name for name in fields if name not in CONTEXT_FIELDS]
    if unknown:
        raise KeyError(f"Unknown log context field: {', '.join(unknown)}")
    return {name: value for name, value in fields.items() if value is not None}


class LogContext:
    """
    Per-task log fields for one generation call.

    The fields live in a single ContextVar holding an immutable mapping, so
    each asyncio task started by ``asyncio.gather`` sees the mapping that
    was current when it was created and never the fields of a sibling call.
    """

    @staticmethod
    def set(**fields: str | None) -> None:
        """Merge fields into the current context; None values are skipped."""
        merged = {**_context.get(), **_checked(fields)}
        _context.set(MappingProxyType(merged))

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_context.get())

    @staticmethod
    def clear() -> None:
        _context.set(_EMPTY)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Overlay fields for the duration of a block, then restore."""
        token = _context.set(MappingProxyType({**_context.get(), **_checked(fields)}))
        try:
            yield
        finally:
            _context.reset(token)


# Attributes every LogRecord carries; anything else came from ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context.get(),
        }
        for name, value in vars(record).items():
            if name not in _RECORD_ATTRIBUTES:
                payload.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Logger ``ifrs_reporting.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


_install_lock = threading.Lock()
_installed_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``ifrs_reporting`` logger.

    Only the first call has an effect until ``reset_logging`` runs.
    """
    global _installed_handler
    with _install_lock:
        if _installed_handler is not None:
            return
        _installed_handler = handler or logging.StreamHandler(stream or sys.stderr)
        _installed_handler.setFormatter(StructuredFormatter())

        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(level)
        root.propagate = False
        root.addHandler(_installed_handler)


def reset_logging() -> None:
    """Remove every handler from ``ifrs_reporting``. Tests only."""
    global _installed_handler
    with _install_lock:
        _installed_handler = None
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for existing in list(root.handlers):
            root.removeHandler(existing)
        root.setLevel(logging.WARNING)
