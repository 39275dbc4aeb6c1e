"""
Plain-data rendering of statement results.

``render_to_dict`` turns a StatementCalculationResult (or any of the frozen
dataclasses it is built from) into dicts, lists, strings, numbers and None,
ready for ``json.dumps``.  Money keeps its exact Decimal digits as a string.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

Rendered = dict[str, Any] | list[Any] | str | int | float | bool | None


def _render_dataclass(obj: Any) -> dict[str, Any]:
    return {f.name: render_to_dict(getattr(obj, f.name)) for f in dataclasses.fields(obj)}


# Checked in order: Enum before str so string-valued enums render as their value.
_CONVERTERS: tuple[tuple[type | tuple[type, ...], Callable[[Any], Rendered]], ...] = (
    (Enum, lambda e: render_to_dict(e.value)),
    ((bool, int, float, str), lambda v: v),
    ((Decimal, UUID), str),
    (date, lambda d: d.isoformat()),
    (Mapping, lambda m: {str(k): render_to_dict(v) for k, v in m.items()}),
    ((list, tuple, frozenset, set), lambda seq: [render_to_dict(v) for v in seq]),
)


def render_to_dict(obj: object) -> Rendered:
    if obj is None:
        return None
    for kinds, convert in _CONVERTERS:
        if isinstance(obj, kinds):
            return convert(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _render_dataclass(obj)
    return str(obj)
