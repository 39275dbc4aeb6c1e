"""
IFRS Primary Statements (``ifrs_statements``).

Responsibility
--------------
Generates the four IFRS primary financial statements from a chart of
accounts, a journal ledger and a fixed asset register: statement of profit
or loss (IAS 1.81-105), statement of financial position (IAS 1.54-80),
statement of cash flows (IAS 7, indirect and direct method) and statement
of changes in equity (IAS 1.106-110).

Architecture position
---------------------
**Statements layer** -- ``ReportingService`` is the only async surface.
It fetches collaborator data once per call and hands an immutable
``LedgerSnapshot`` to pure builders in ``profit_loss``, ``balance_sheet``,
``cash_flow`` and ``equity_changes``.  Engines (aggregation,
classification, derived adjustments, reconciliation) live in
``ifrs_engines``.

Invariants enforced
-------------------
* Total assets equal total liabilities plus equity after derived
  adjustments (depreciation and disposal results from the register).
* Net cash flow reconciles to the movement in cash within 0.01.
* Sections exclude immaterial items from the list but keep them in totals.

Failure modes
-------------
* Collaborator failure -> ``StructuralError`` subclass, no partial result.
* Business-data issues (missing comparative, zero revenue, empty sections)
  -> validation findings on the result, never exceptions.

Audit relevance
---------------
Generation is deterministic given the snapshot.  Metadata carries the
preparation timestamp, accounting standard and audit status.
"""

from ifrs_statements.balance_sheet import BalanceSheetBuilder
from ifrs_statements.base import LedgerSnapshot, StatementBuilder
from ifrs_statements.cash_flow import CashFlowBuilder
from ifrs_statements.compliance import DEFAULT_RULES, ComplianceValidator
from ifrs_statements.config import (
    CalculationContext,
    CompanySettings,
    IFRSSettings,
    ReportingConfig,
)
from ifrs_statements.equity_changes import EquityChangesBuilder
from ifrs_statements.formatting import (
    CurrencyFormatter,
    DefaultCurrencyFormatter,
    PlainFormatter,
)
from ifrs_statements.models import (
    BalanceSheetData,
    CashFlowData,
    CashFlowMethod,
    EquityChangesData,
    EquityComponent,
    FinancialStatementItem,
    FinancialStatementPackage,
    FinancialStatementSection,
    FinancialSummary,
    HighlightStatus,
    ProfitLossData,
    Severity,
    StatementCalculationResult,
    StatementMetadata,
    StatementMetric,
    StatementType,
    StatementValidationResult,
    SummaryHighlight,
)
from ifrs_statements.profit_loss import ProfitLossBuilder
from ifrs_statements.providers import (
    InMemoryChartOfAccounts,
    InMemoryFixedAssetRegister,
    InMemoryLedger,
)
from ifrs_statements.rendering import render_to_dict
from ifrs_statements.service import ReportingService
from ifrs_statements.summary import summarize

__all__ = [
    "BalanceSheetBuilder",
    "BalanceSheetData",
    "CalculationContext",
    "CashFlowBuilder",
    "CashFlowData",
    "CashFlowMethod",
    "CompanySettings",
    "ComplianceValidator",
    "CurrencyFormatter",
    "DEFAULT_RULES",
    "DefaultCurrencyFormatter",
    "EquityChangesBuilder",
    "EquityChangesData",
    "EquityComponent",
    "FinancialStatementItem",
    "FinancialStatementPackage",
    "FinancialStatementSection",
    "FinancialSummary",
    "HighlightStatus",
    "IFRSSettings",
    "InMemoryChartOfAccounts",
    "InMemoryFixedAssetRegister",
    "InMemoryLedger",
    "LedgerSnapshot",
    "PlainFormatter",
    "ProfitLossBuilder",
    "ProfitLossData",
    "ReportingConfig",
    "ReportingService",
    "Severity",
    "StatementBuilder",
    "StatementCalculationResult",
    "StatementMetadata",
    "StatementMetric",
    "StatementType",
    "StatementValidationResult",
    "SummaryHighlight",
    "render_to_dict",
    "summarize",
]
