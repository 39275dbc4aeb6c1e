"""
IFRS_ENGINE_TRACE records for the calculation engines.

``@traced_engine`` wraps an engine method and, when the ``ifrs_reporting``
logger is enabled for DEBUG, logs one record per call carrying the engine
name and version, a fingerprint of the chosen arguments, and the wall time.
The wrapped call's arguments and result pass through untouched.

    @traced_engine("balance_aggregator", "1.0", fingerprint_fields=("period",))
    def aggregate(self, accounts, entries, period):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import json
import logging
import time
from collections.abc import Callable, Mapping
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from ifrs_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

FINGERPRINT_LENGTH = 16


def _plain(value: Any) -> Any:
    """Reduce a value to JSON primitives with a stable ordering."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, (Decimal, UUID, float)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return _plain(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            "__type__": type(value).__name__,
            **{f.name: _plain(getattr(value, f.name)) for f in dataclasses.fields(value)},
        }
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: Mapping[str, Any],
) -> str:
    """SHA-256 prefix over the named arguments; a missing one counts as None."""
    selected = {name: _plain(kwargs.get(name)) for name in fingerprint_fields}
    canonical = json.dumps(selected, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorator emitting IFRS_ENGINE_TRACE around an engine call.

    Positional arguments are bound to parameter names first, so positional
    and keyword calls with the same values produce the same fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not _logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)

            arguments = signature.bind_partial(*args, **kwargs).arguments
            fingerprint = (
                compute_input_fingerprint(fingerprint_fields, arguments)
                if fingerprint_fields
                else ""
            )
            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed = time.perf_counter() - started

            _logger.debug(
                "IFRS_ENGINE_TRACE",
                extra={
                    "trace_type": "IFRS_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fingerprint,
                    "duration_ms": round(elapsed * 1000, 3),
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
