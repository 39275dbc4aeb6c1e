"""
Currency formatting for the formatted-string fields on statement items.

Presentation only: the numeric fields stay authoritative and unrounded.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol, runtime_checkable

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


@runtime_checkable
class CurrencyFormatter(Protocol):
    def format(self, amount: Decimal, currency_code: str) -> str:
        ...


class DefaultCurrencyFormatter:
    """
    ``-$1,234.50`` style: leading minus, symbol for USD/EUR/GBP, otherwise
    the ISO code and a space, thousands grouping, fixed precision.
    """

    def __init__(self, precision: int = 2):
        if precision < 0:
            raise ValueError("precision cannot be negative")
        self.precision = precision

    def format(self, amount: Decimal, currency_code: str) -> str:
        quantum = Decimal(1).scaleb(-self.precision)
        rounded = amount.quantize(quantum, rounding=ROUND_HALF_UP)
        prefix = CURRENCY_SYMBOLS.get(currency_code.upper(), f"{currency_code.upper()} ")
        sign = "-" if rounded < 0 else ""
        return f"{sign}{prefix}{abs(rounded):,.{self.precision}f}"


class PlainFormatter:
    """Renders the bare amount; useful where formatting is irrelevant."""

    def format(self, amount: Decimal, currency_code: str) -> str:
        return str(amount)
