"""
Financial Statement Models (``ifrs_statements.models``).

Responsibility
--------------
Frozen dataclass value objects for the four IFRS primary statements, their
sections, line items and metrics, validation findings, and the
``StatementCalculationResult`` envelope returned to callers.

Architecture position
---------------------
**Statements layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``; tuples, never lists.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``prior_period`` fields are ``None`` (not zero) when no comparative period
  was requested; ``variance_percent`` is ``None`` when the prior amount is
  absent or zero.
* ``section.total == sum(item.current_period) + section.immaterial_total``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Generic, TypeVar
from uuid import UUID

from ifrs_engines.depreciation import DerivedAdjustments
from ifrs_engines.reconciliation import CashReconciliation
from ifrs_kernel.domain.ledger import StatementPeriod

ZERO = Decimal("0")


# =========================================================================
# Enums
# =========================================================================


class StatementType(str, Enum):
    PROFIT_LOSS = "profit_loss"
    BALANCE_SHEET = "balance_sheet"
    CASH_FLOW = "cash_flow"
    EQUITY_CHANGES = "equity_changes"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class CashFlowMethod(str, Enum):
    DIRECT = "direct"
    INDIRECT = "indirect"


class HighlightStatus(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    WARNING = "warning"


# =========================================================================
# Metadata and findings (common to all statements)
# =========================================================================


@dataclass(frozen=True)
class StatementMetadata:
    company_name: str
    statement_title: str
    statement_type: StatementType
    period: StatementPeriod
    prior_period: StatementPeriod | None
    currency: str
    preparation_date: datetime
    accounting_standard: str
    audit_status: str


@dataclass(frozen=True)
class StatementValidationResult:
    """One non-fatal finding about a generated statement."""

    statement_type: StatementType
    rule_name: str
    severity: Severity
    message: str
    suggestion: str | None = None
    ifrs_reference: str | None = None


# =========================================================================
# Building blocks
# =========================================================================


@dataclass(frozen=True)
class FinancialStatementItem:
    code: str
    name: str
    current_period: Decimal
    formatted_current: str
    prior_period: Decimal | None = None
    formatted_prior: str | None = None
    variance: Decimal | None = None
    variance_percent: Decimal | None = None
    formatted_variance: str | None = None
    level: int = 1
    ifrs_reference: str | None = None
    is_material: bool = True
    account_id: UUID | None = None
    # Synthetic items come from derived adjustments, not ledger accounts
    is_derived: bool = False


@dataclass(frozen=True)
class FinancialStatementSection:
    """
    Ordered line items plus totals.

    Items below the materiality threshold are not listed; their amounts
    are carried in ``immaterial_total`` and are part of ``total``.
    """

    code: str
    name: str
    items: tuple[FinancialStatementItem, ...]
    total: Decimal
    formatted_total: str
    prior_total: Decimal | None = None
    formatted_prior_total: str | None = None
    variance: Decimal | None = None
    variance_percent: Decimal | None = None
    immaterial_total: Decimal = ZERO
    immaterial_count: int = 0
    ifrs_reference: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items and self.immaterial_count == 0

    def item(self, code: str) -> FinancialStatementItem | None:
        for candidate in self.items:
            if candidate.code == code:
                return candidate
        return None


@dataclass(frozen=True)
class StatementMetric:
    """A computed subtotal such as gross profit, with its revenue margin."""

    code: str
    name: str
    current_period: Decimal
    margin: Decimal
    formatted_current: str
    prior_period: Decimal | None = None
    prior_margin: Decimal | None = None
    variance: Decimal | None = None
    variance_percent: Decimal | None = None
    formatted_prior: str | None = None
    ifrs_reference: str | None = None


# =========================================================================
# Statement of Profit or Loss (IAS 1.81A-1.105)
# =========================================================================


@dataclass(frozen=True)
class ProfitLossData:
    revenue: FinancialStatementSection
    cost_of_sales: FinancialStatementSection
    operating_expenses: FinancialStatementSection
    finance_income: FinancialStatementSection
    finance_costs: FinancialStatementSection
    tax_expense: FinancialStatementSection
    gross_profit: StatementMetric
    operating_profit: StatementMetric
    profit_before_tax: StatementMetric
    profit_for_period: StatementMetric
    adjustments: DerivedAdjustments = field(default_factory=DerivedAdjustments)

    @property
    def sections(self) -> tuple[FinancialStatementSection, ...]:
        return (
            self.revenue,
            self.cost_of_sales,
            self.operating_expenses,
            self.finance_income,
            self.finance_costs,
            self.tax_expense,
        )

    @property
    def metrics(self) -> tuple[StatementMetric, ...]:
        return (
            self.gross_profit,
            self.operating_profit,
            self.profit_before_tax,
            self.profit_for_period,
        )

    @property
    def gross_profit_margin(self) -> Decimal:
        return self.gross_profit.margin

    @property
    def net_profit_margin(self) -> Decimal:
        return self.profit_for_period.margin


# =========================================================================
# Statement of Financial Position (IAS 1.54-1.80A)
# =========================================================================


@dataclass(frozen=True)
class BalanceSheetData:
    as_of: date
    non_current_assets: FinancialStatementSection
    current_assets: FinancialStatementSection
    current_liabilities: FinancialStatementSection
    non_current_liabilities: FinancialStatementSection
    equity: FinancialStatementSection
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    cash_and_equivalents: Decimal
    prior_as_of: date | None = None
    prior_total_assets: Decimal | None = None
    prior_total_liabilities: Decimal | None = None
    prior_total_equity: Decimal | None = None
    prior_cash_and_equivalents: Decimal | None = None
    # Register adjustments accumulated up to as_of, not the period movement
    adjustments: DerivedAdjustments = field(default_factory=DerivedAdjustments)

    @property
    def sections(self) -> tuple[FinancialStatementSection, ...]:
        return (
            self.non_current_assets,
            self.current_assets,
            self.current_liabilities,
            self.non_current_liabilities,
            self.equity,
        )

    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return self.total_liabilities + self.total_equity

    @property
    def balance_difference(self) -> Decimal:
        return self.total_assets - self.total_liabilities_and_equity

    @property
    def is_balanced(self) -> bool:
        return abs(self.balance_difference) < Decimal("0.01")


# =========================================================================
# Statement of Cash Flows (IAS 7)
# =========================================================================


@dataclass(frozen=True)
class CashFlowData:
    """
    Operating, investing and financing sections plus the reconciliation
    against balance-sheet cash.

    ``net_profit + non_cash_adjustments + working_capital_changes`` equals
    the operating total under either method.
    """

    method: CashFlowMethod
    operating_activities: FinancialStatementSection
    investing_activities: FinancialStatementSection
    financing_activities: FinancialStatementSection
    supplementary_disclosures: FinancialStatementSection
    net_profit: Decimal
    non_cash_adjustments: Decimal
    working_capital_changes: Decimal
    net_cash_flow: Decimal
    opening_cash: Decimal
    closing_cash: Decimal
    reconciliation: CashReconciliation
    prior_net_cash_flow: Decimal | None = None

    @property
    def sections(self) -> tuple[FinancialStatementSection, ...]:
        return (
            self.operating_activities,
            self.investing_activities,
            self.financing_activities,
        )

    @property
    def operating_cash_flow(self) -> Decimal:
        return self.operating_activities.total

    @property
    def investing_cash_flow(self) -> Decimal:
        return self.investing_activities.total

    @property
    def financing_cash_flow(self) -> Decimal:
        return self.financing_activities.total

    @property
    def is_reconciled(self) -> bool:
        return self.reconciliation.is_reconciled


# =========================================================================
# Statement of Changes in Equity (IAS 1.106-1.110)
# =========================================================================


@dataclass(frozen=True)
class EquityComponent:
    """
    Opening-to-closing roll of one equity component.

    ``closing`` is measured from account positions at period end, not
    derived from the movements, so ``unexplained_difference`` exposes any
    movement the classification missed.  ``prior_closing`` and the
    variance fields are set only when a prior period was requested.
    """

    code: str
    name: str
    opening: Decimal
    profit_for_period: Decimal
    other_comprehensive_income: Decimal
    dividends: Decimal
    share_transactions: Decimal
    other_movements: Decimal
    closing: Decimal
    formatted_opening: str = ""
    formatted_closing: str = ""
    prior_closing: Decimal | None = None
    variance: Decimal | None = None
    variance_percent: Decimal | None = None
    formatted_prior_closing: str | None = None

    @property
    def total_movements(self) -> Decimal:
        return (
            self.profit_for_period
            + self.other_comprehensive_income
            + self.dividends
            + self.share_transactions
            + self.other_movements
        )

    @property
    def expected_closing(self) -> Decimal:
        return self.opening + self.total_movements

    @property
    def unexplained_difference(self) -> Decimal:
        return self.closing - self.expected_closing


@dataclass(frozen=True)
class EquityChangesData:
    components: tuple[EquityComponent, ...]
    movements: FinancialStatementSection
    opening_total: Decimal
    closing_total: Decimal
    profit_for_period: Decimal
    other_comprehensive_income: Decimal
    total_comprehensive_income: Decimal
    dividends: Decimal
    share_transactions: Decimal
    other_movements: Decimal
    prior_closing_total: Decimal | None = None

    @property
    def sections(self) -> tuple[FinancialStatementSection, ...]:
        return (self.movements,)

    @property
    def total_movements(self) -> Decimal:
        return sum((c.total_movements for c in self.components), ZERO)

    def component(self, code: str) -> EquityComponent | None:
        for candidate in self.components:
            if candidate.code == code:
                return candidate
        return None


# =========================================================================
# Result envelopes
# =========================================================================

StatementDataT = TypeVar(
    "StatementDataT",
    ProfitLossData,
    BalanceSheetData,
    CashFlowData,
    EquityChangesData,
)


@dataclass(frozen=True)
class StatementCalculationResult(Generic[StatementDataT]):
    """
    Immutable output of one generation call.

    The engine never refuses to return a statement that fails a check;
    callers inspect ``validation`` (``errors`` in particular) before
    treating it as presentation-ready.
    """

    data: StatementDataT
    validation: tuple[StatementValidationResult, ...]
    metadata: StatementMetadata
    calculation_time_ms: float
    warnings: tuple[str, ...] = ()

    @property
    def errors(self) -> tuple[StatementValidationResult, ...]:
        return tuple(v for v in self.validation if v.severity is Severity.ERROR)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def is_presentation_ready(self) -> bool:
        return not self.has_errors

    def findings(self, rule_name: str) -> tuple[StatementValidationResult, ...]:
        return tuple(v for v in self.validation if v.rule_name == rule_name)


@dataclass(frozen=True)
class SummaryHighlight:
    metric: str
    status: HighlightStatus
    message: str


@dataclass(frozen=True)
class FinancialSummary:
    """
    Headline figures across the package.

    Ratios are plain quotients except ``return_on_assets`` and
    ``return_on_equity``, which are percentages.  A ratio whose denominator
    is zero or negative is reported as zero.
    """

    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    revenue: Decimal
    net_income: Decimal
    operating_cash_flow: Decimal
    current_ratio: Decimal
    debt_to_equity: Decimal
    return_on_assets: Decimal
    return_on_equity: Decimal
    highlights: tuple[SummaryHighlight, ...] = ()

    def highlight(self, metric: str) -> SummaryHighlight | None:
        for candidate in self.highlights:
            if candidate.metric == metric:
                return candidate
        return None


@dataclass(frozen=True)
class FinancialStatementPackage:
    """All four statements for one period, their summary and cross-statement findings."""

    profit_loss: StatementCalculationResult[ProfitLossData]
    balance_sheet: StatementCalculationResult[BalanceSheetData]
    cash_flow: StatementCalculationResult[CashFlowData]
    equity_changes: StatementCalculationResult[EquityChangesData]
    summary: FinancialSummary
    cross_statement_validation: tuple[StatementValidationResult, ...] = ()

    @property
    def all_validation(self) -> tuple[StatementValidationResult, ...]:
        return (
            self.profit_loss.validation
            + self.balance_sheet.validation
            + self.cash_flow.validation
            + self.equity_changes.validation
            + self.cross_statement_validation
        )

    @property
    def has_errors(self) -> bool:
        return any(v.severity is Severity.ERROR for v in self.all_validation)
