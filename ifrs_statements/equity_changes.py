"""
EquityChangesBuilder -- Statement of Changes in Equity (IAS 1.106-1.110).

Equity accounts are partitioned into four components by the classifier:
share capital, retained earnings (including dividend accounts), other
comprehensive income and other reserves.  Each component rolls

    opening + profit + OCI + dividends + share transactions + other = closing

where opening and closing are measured independently from positions the day
before the period starts and at period end.  Unclosed revenue and expense
balances, plus register adjustments accumulated to each date, are carried
in retained earnings, matching the balance sheet's accumulated profit line.
With a prior period, each component also carries its closing position at
the prior period end and the variance against it (IAS 1.38).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from ifrs_engines.aggregation import total_for
from ifrs_engines.arithmetic import percent_change
from ifrs_engines.classification import SectionKind
from ifrs_engines.depreciation import DerivedAdjustments
from ifrs_kernel.logging_config import get_logger
from ifrs_statements.base import LedgerSnapshot, StatementBuilder
from ifrs_statements.config import CalculationContext
from ifrs_statements.models import EquityChangesData, EquityComponent, StatementType
from ifrs_statements.sections import LineAmount, SectionBuilder

logger = get_logger("statements.equity_changes")

ZERO = Decimal("0")

COMPONENTS = (
    (SectionKind.SHARE_CAPITAL, "SC", "Share capital"),
    (SectionKind.RETAINED_EARNINGS, "RE", "Retained earnings"),
    (SectionKind.OTHER_COMPREHENSIVE_INCOME, "OCI", "Other comprehensive income"),
    (SectionKind.OTHER_RESERVES, "OR", "Other reserves"),
)


@dataclass(frozen=True)
class _Position:
    """Account positions at a date plus the register effect accumulated to it."""

    balances: Mapping[UUID, Decimal]
    register_effect: Decimal


@dataclass(frozen=True)
class _Movements:
    profit: Decimal
    oci: Decimal
    dividends: Decimal
    share_transactions: Decimal
    other: Decimal


class EquityChangesBuilder(StatementBuilder):
    statement_type = StatementType.EQUITY_CHANGES
    title = "Statement of Changes in Equity"

    def build(self, snapshot: LedgerSnapshot, context: CalculationContext) -> EquityChangesData:
        period = context.current_period
        prior_period = context.prior_period
        opening = self._position_at(snapshot, period.day_before_start)
        closing = self._position_at(snapshot, period.end_date)
        prior_closing = (
            self._position_at(snapshot, prior_period.end_date) if prior_period else None
        )
        activity = self.activity(snapshot, period)
        adjustments = self.derived(snapshot, period)

        sb = self.section_builder(context)
        components = tuple(
            self._component(
                snapshot, sb, kind, code, name, opening, closing, prior_closing, activity, adjustments
            )
            for kind, code, name in COMPONENTS
        )

        current = self._movements(snapshot, activity, adjustments)
        prior = (
            self._movements(
                snapshot,
                self.activity(snapshot, prior_period),
                self.derived(snapshot, prior_period),
            )
            if prior_period is not None
            else None
        )
        movements = sb.section(
            "EQ_MOV",
            "Movements in equity",
            _movement_lines(current, prior),
            ifrs_reference="IAS 1.106(d)",
        )

        data = EquityChangesData(
            components=components,
            movements=movements,
            opening_total=sum((c.opening for c in components), ZERO),
            closing_total=sum((c.closing for c in components), ZERO),
            profit_for_period=current.profit,
            other_comprehensive_income=current.oci,
            total_comprehensive_income=current.profit + current.oci,
            dividends=current.dividends,
            share_transactions=current.share_transactions,
            other_movements=current.other,
            prior_closing_total=(
                sum((c.prior_closing for c in components), ZERO)
                if prior_closing is not None
                else None
            ),
        )

        logger.info(
            "equity_changes_built",
            extra={
                "period": str(period),
                "opening_total": str(data.opening_total),
                "closing_total": str(data.closing_total),
                "total_comprehensive_income": str(data.total_comprehensive_income),
            },
        )
        return data

    def _position_at(self, snapshot: LedgerSnapshot, as_of: date) -> _Position:
        return _Position(
            balances=self.position(snapshot, as_of),
            register_effect=self.derived_to(snapshot, as_of).net_profit_effect,
        )

    def _component_balance(
        self,
        snapshot: LedgerSnapshot,
        kind: SectionKind,
        position: _Position,
    ) -> Decimal:
        amount = total_for(position.balances, self.accounts_in(snapshot, kind))
        if kind is SectionKind.RETAINED_EARNINGS:
            amount += self.ledger_profit(snapshot, position.balances) + position.register_effect
        return amount

    def _component(
        self,
        snapshot: LedgerSnapshot,
        sb: SectionBuilder,
        kind: SectionKind,
        code: str,
        name: str,
        opening: _Position,
        closing: _Position,
        prior_closing: _Position | None,
        activity: Mapping[UUID, Decimal],
        adjustments: DerivedAdjustments,
    ) -> EquityComponent:
        accounts = self.accounts_in(snapshot, kind)
        opening_amount = self._component_balance(snapshot, kind, opening)
        closing_amount = self._component_balance(snapshot, kind, closing)
        moved = total_for(activity, accounts)

        profit = oci = dividends = shares = other = ZERO
        if kind is SectionKind.RETAINED_EARNINGS:
            dividend_ids = {a.account_id for a in self.accounts_in(snapshot, SectionKind.DIVIDENDS)}
            dividends = total_for(activity, (a for a in accounts if a.account_id in dividend_ids))
            other = moved - dividends
            profit = self.ledger_profit(snapshot, activity) + adjustments.net_profit_effect
        elif kind is SectionKind.SHARE_CAPITAL:
            shares = moved
        elif kind is SectionKind.OTHER_COMPREHENSIVE_INCOME:
            oci = moved
        else:
            other = moved

        prior_amount = variance = variance_percent = None
        if prior_closing is not None:
            prior_amount = self._component_balance(snapshot, kind, prior_closing)
            variance = closing_amount - prior_amount
            variance_percent = percent_change(
                variance, prior_amount, sb.context.rounding_precision
            )

        return EquityComponent(
            code=code,
            name=name,
            opening=opening_amount,
            profit_for_period=profit,
            other_comprehensive_income=oci,
            dividends=dividends,
            share_transactions=shares,
            other_movements=other,
            closing=closing_amount,
            formatted_opening=sb.fmt(opening_amount),
            formatted_closing=sb.fmt(closing_amount),
            prior_closing=prior_amount,
            variance=variance,
            variance_percent=variance_percent,
            formatted_prior_closing=sb.fmt(prior_amount),
        )

    def _movements(
        self,
        snapshot: LedgerSnapshot,
        activity: Mapping[UUID, Decimal],
        adjustments: DerivedAdjustments,
    ) -> _Movements:
        def moved(kind: SectionKind) -> Decimal:
            return total_for(activity, self.accounts_in(snapshot, kind))

        dividends = moved(SectionKind.DIVIDENDS)
        return _Movements(
            profit=self.ledger_profit(snapshot, activity) + adjustments.net_profit_effect,
            oci=moved(SectionKind.OTHER_COMPREHENSIVE_INCOME),
            dividends=dividends,
            share_transactions=moved(SectionKind.SHARE_CAPITAL),
            other=(
                moved(SectionKind.RETAINED_EARNINGS)
                - dividends
                + moved(SectionKind.OTHER_RESERVES)
            ),
        )


def _movement_lines(current: _Movements, prior: _Movements | None) -> list[LineAmount]:
    rows = (
        ("EQ_PROFIT", "Profit for the period", "profit", "IAS 1.106(d)(i)"),
        ("EQ_OCI", "Other comprehensive income", "oci", "IAS 1.106(d)(ii)"),
        ("EQ_DIV", "Dividends", "dividends", "IAS 1.107"),
        ("EQ_SHARES", "Issue/(redemption) of share capital", "share_transactions", "IAS 1.106(d)(iii)"),
        ("EQ_OTHER", "Transfers and other movements", "other", None),
    )
    return [
        LineAmount(
            code=code,
            name=name,
            current=getattr(current, attr),
            prior=getattr(prior, attr) if prior is not None else None,
            ifrs_reference=ref,
        )
        for code, name, attr, ref in rows
    ]
