"""
ifrs_engines.depreciation -- Derived adjustments from the fixed asset register.

Responsibility:
    Compute the non-ledger amounts folded into the statements, as a
    movement over a period or a cumulative position at a date:
    straight-line depreciation and gains/losses on disposal.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The asset register itself
    is fetched by the reporting service; this module only does arithmetic.

Invariants enforced:
    - Monthly depreciation is capped at book value less residual value and
      is zero for assets that are not active.  Cumulative depreciation never
      exceeds book value less residual value.
    - Months from acquisition to a date are round(days / 30.44), half up.
    - A period movement is the position at period end less the position
      the day before the period starts.
    - A disposal without a price is a disposal for nothing.
    - Gains and losses are reported as separate non-negative amounts.

Failure modes:
    None.  An empty register yields zero adjustments.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol, runtime_checkable

from ifrs_engines.tracer import traced_engine
from ifrs_kernel.domain.ledger import FixedAsset, FixedAssetStatus, StatementPeriod
from ifrs_kernel.logging_config import get_logger

logger = get_logger("engines.depreciation")

ZERO = Decimal("0")
DAYS_PER_MONTH = Decimal("30.44")
MONTHS_PER_YEAR = Decimal("12")


@runtime_checkable
class FixedAssetAdjustmentProvider(Protocol):
    def monthly_depreciation(self, asset: FixedAsset) -> Decimal:
        ...

    def disposal_gain_loss(self, asset: FixedAsset, disposal_price: Decimal) -> Decimal:
        """Positive for a gain, negative for a loss."""
        ...


class StraightLineAdjustmentProvider:
    """Straight-line depreciation over useful life, down to residual value."""

    def annual_depreciation(self, asset: FixedAsset) -> Decimal:
        return (asset.cost - asset.residual_value) / Decimal(asset.useful_life_years)

    def monthly_depreciation(self, asset: FixedAsset) -> Decimal:
        if asset.status is not FixedAssetStatus.ACTIVE:
            return ZERO
        monthly = self.annual_depreciation(asset) / MONTHS_PER_YEAR
        return min(monthly, asset.depreciable_remaining)

    def disposal_gain_loss(self, asset: FixedAsset, disposal_price: Decimal) -> Decimal:
        return disposal_price - asset.book_value


@dataclass(frozen=True)
class DerivedAdjustments:
    """Derived amounts for one period; all fields are non-negative."""

    depreciation: Decimal = ZERO
    disposal_gain: Decimal = ZERO
    disposal_loss: Decimal = ZERO

    @property
    def net_profit_effect(self) -> Decimal:
        return self.disposal_gain - self.disposal_loss - self.depreciation

    @property
    def is_empty(self) -> bool:
        return not (self.depreciation or self.disposal_gain or self.disposal_loss)


def months_between(start: date, end: date) -> int:
    if end <= start:
        return 0
    months = (Decimal((end - start).days) / DAYS_PER_MONTH).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return int(months)


class DerivedAdjustmentCalculator:
    """
    Derived amounts from the register, as positions and as period movements.

    ``to_date`` is the cumulative position from each asset's acquisition up
    to a date; ``for_period`` is the movement between the position the day
    before the period starts and the position at period end.  Statements
    that measure opening and closing positions therefore always roll
    forward exactly.

    An active asset's ``accumulated_depreciation`` is depreciation carried
    in at acquisition; the schedule spreads what remains above residual
    value.  A disposed asset's figure is its accumulated depreciation at
    disposal and fixes the carrying amount behind the disposal result.
    """

    def __init__(self, provider: FixedAssetAdjustmentProvider | None = None):
        self.provider = provider or StraightLineAdjustmentProvider()

    def depreciation_to(self, asset: FixedAsset, as_of: date) -> Decimal:
        if asset.acquisition_date > as_of:
            return ZERO
        months = months_between(asset.acquisition_date, as_of)
        charge = self.provider.monthly_depreciation(asset) * months
        return min(charge, asset.depreciable_remaining)

    def disposal_result_to(self, asset: FixedAsset, as_of: date) -> Decimal:
        """Gain (positive) or loss (negative) on a disposal dated on or before ``as_of``."""
        if (
            asset.status is not FixedAssetStatus.DISPOSED
            or asset.disposal_date is None
            or asset.disposal_date > as_of
        ):
            return ZERO
        # Scrapped with no proceeds: the whole carrying amount is lost.
        price = asset.disposal_price if asset.disposal_price is not None else ZERO
        return self.provider.disposal_gain_loss(asset, price)

    def depreciation_for(self, asset: FixedAsset, period: StatementPeriod) -> Decimal:
        return self.depreciation_to(asset, period.end_date) - self.depreciation_to(
            asset, period.day_before_start
        )

    def disposal_result_for(self, asset: FixedAsset, period: StatementPeriod) -> Decimal:
        if asset.disposal_date is None or not period.contains(asset.disposal_date):
            return ZERO
        return self.disposal_result_to(asset, period.end_date)

    @traced_engine("derived_adjustments", "1.0", fingerprint_fields=("as_of",))
    def to_date(self, assets: Sequence[FixedAsset], as_of: date) -> DerivedAdjustments:
        adjustments = _combine(
            (self.depreciation_to(a, as_of), self.disposal_result_to(a, as_of)) for a in assets
        )
        logger.debug(
            "derived_adjustments_to_date",
            extra={"as_of": as_of.isoformat(), "asset_count": len(assets), **_amounts(adjustments)},
        )
        return adjustments

    @traced_engine("derived_adjustments", "1.0", fingerprint_fields=("period",))
    def for_period(
        self,
        assets: Sequence[FixedAsset],
        period: StatementPeriod,
    ) -> DerivedAdjustments:
        adjustments = _combine(
            (self.depreciation_for(a, period), self.disposal_result_for(a, period)) for a in assets
        )
        logger.debug(
            "derived_adjustments_computed",
            extra={"period": str(period), "asset_count": len(assets), **_amounts(adjustments)},
        )
        return adjustments


def _combine(per_asset: Iterable[tuple[Decimal, Decimal]]) -> DerivedAdjustments:
    depreciation = gain = loss = ZERO
    for charge, result in per_asset:
        depreciation += charge
        if result > ZERO:
            gain += result
        elif result < ZERO:
            loss -= result
    return DerivedAdjustments(depreciation=depreciation, disposal_gain=gain, disposal_loss=loss)


def _amounts(adjustments: DerivedAdjustments) -> dict[str, str]:
    return {
        "depreciation": str(adjustments.depreciation),
        "disposal_gain": str(adjustments.disposal_gain),
        "disposal_loss": str(adjustments.disposal_loss),
    }
