"""
Shared plumbing for the four statement builders.

A LedgerSnapshot is the immutable input of one generation call: the chart,
every journal entry from ledger inception to the latest date any statement
needs, and the fixed asset register.  Builders derive period activity and
point-in-time positions from it through the BalanceAggregator.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar
from uuid import UUID

from ifrs_engines.aggregation import BalanceAggregator, total_for
from ifrs_engines.classification import SectionClassifier, SectionKind
from ifrs_engines.depreciation import DerivedAdjustmentCalculator, DerivedAdjustments
from ifrs_kernel.domain.ledger import (
    Account,
    AccountType,
    FixedAsset,
    JournalEntry,
    StatementPeriod,
)
from ifrs_statements.config import CalculationContext
from ifrs_statements.formatting import CurrencyFormatter, DefaultCurrencyFormatter
from ifrs_statements.models import StatementType
from ifrs_statements.sections import SectionBuilder


@dataclass(frozen=True)
class LedgerSnapshot:
    accounts: tuple[Account, ...]
    entries: tuple[JournalEntry, ...]
    fixed_assets: tuple[FixedAsset, ...] = ()


class StatementBuilder:
    """
    Base for ProfitLossBuilder, BalanceSheetBuilder, CashFlowBuilder and
    EquityChangesBuilder.

    Holds only immutable collaborators; ``build`` never mutates the
    snapshot, so one builder may serve concurrent generation calls.
    """

    statement_type: ClassVar[StatementType]
    title: ClassVar[str]

    def __init__(
        self,
        classifier: SectionClassifier | None = None,
        aggregator: BalanceAggregator | None = None,
        adjustments: DerivedAdjustmentCalculator | None = None,
        formatter: CurrencyFormatter | None = None,
    ):
        self.classifier = classifier or SectionClassifier()
        self.aggregator = aggregator or BalanceAggregator()
        self.adjustments = adjustments or DerivedAdjustmentCalculator()
        self.formatter = formatter

    def section_builder(self, context: CalculationContext) -> SectionBuilder:
        formatter = self.formatter or DefaultCurrencyFormatter(context.rounding_precision)
        return SectionBuilder(context, formatter)

    def activity(self, snapshot: LedgerSnapshot, period: StatementPeriod) -> dict[UUID, Decimal]:
        return self.aggregator.aggregate(snapshot.accounts, snapshot.entries, period)

    def position(self, snapshot: LedgerSnapshot, as_of: date) -> dict[UUID, Decimal]:
        return self.aggregator.aggregate_as_of(snapshot.accounts, snapshot.entries, as_of)

    def derived(self, snapshot: LedgerSnapshot, period: StatementPeriod) -> DerivedAdjustments:
        return self.adjustments.for_period(snapshot.fixed_assets, period)

    def derived_to(self, snapshot: LedgerSnapshot, as_of: date) -> DerivedAdjustments:
        """Register adjustments accumulated from acquisition up to ``as_of``."""
        return self.adjustments.to_date(snapshot.fixed_assets, as_of)

    def accounts_in(self, snapshot: LedgerSnapshot, kind: SectionKind) -> tuple[Account, ...]:
        return self.classifier.classify(snapshot.accounts, kind)

    @staticmethod
    def ledger_profit(snapshot: LedgerSnapshot, balances: Mapping[UUID, Decimal]) -> Decimal:
        """Revenue minus expense across every revenue and expense account."""
        revenue = total_for(
            balances, (a for a in snapshot.accounts if a.account_type is AccountType.REVENUE)
        )
        expense = total_for(
            balances, (a for a in snapshot.accounts if a.account_type is AccountType.EXPENSE)
        )
        return revenue - expense
