"""
ifrs_engines.arithmetic -- Decimal division that never leaks NaN or Infinity.

Responsibility:
    Every ratio in the statements (variance percent, margins) goes through
    these helpers.  ``strict_divide`` raises ComputationError on a zero
    divisor; ``safe_divide``, ``percent_change`` and ``margin_percent``
    intercept that error and coerce it to the documented default.

Architecture position:
    Engines -- pure, zero I/O.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ifrs_kernel.exceptions import ComputationError

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def strict_divide(numerator: Decimal, denominator: Decimal, operation: str = "divide") -> Decimal:
    if denominator == ZERO or not denominator.is_finite() or not numerator.is_finite():
        raise ComputationError(operation, numerator, denominator)
    return numerator / denominator


def safe_divide(
    numerator: Decimal,
    denominator: Decimal,
    default: Decimal | None = None,
) -> Decimal | None:
    try:
        return strict_divide(numerator, denominator)
    except ComputationError:
        return default


def quantize(amount: Decimal, precision: int) -> Decimal:
    return amount.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)


def percent_change(variance: Decimal, base: Decimal | None, precision: int = 2) -> Decimal | None:
    """variance / base x 100, or None when the base is absent or zero."""
    if base is None:
        return None
    ratio = safe_divide(variance, base)
    if ratio is None:
        return None
    return quantize(ratio * HUNDRED, precision)


def margin_percent(metric: Decimal, revenue: Decimal, precision: int = 2) -> Decimal:
    """metric / revenue x 100, or 0 when revenue is zero."""
    ratio = safe_divide(metric, revenue, default=ZERO)
    return quantize(ratio * HUNDRED, precision)
