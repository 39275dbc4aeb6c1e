"""
Pytest fixtures for the IFRS reporting test suite.

Provides:
- Structured logging configured once per session, plus a ``captured_logs``
  fixture returning parsed JSON records
- A small, overlap-free chart of accounts and a two-year ledger
  (2023 comparative, 2024 current) with hand-checked statement figures
- Builders for CalculationContext and ReportingService

Figures for the standard ledger (2024, no fixed asset register):
    revenue 120,000  cost of sales 40,000  gross profit 80,000
    operating expenses 16,000 (rent 12,000, depreciation 4,000)
    finance costs 2,000  tax 5,000  profit for the period 57,000
    cash 70,000 -> 133,000  total assets 174,000  total equity 124,000
"""

import json
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import UUID, uuid4

import pytest

from ifrs_kernel.domain.clock import DeterministicClock
from ifrs_kernel.domain.ledger import (
    Account,
    AccountType,
    JournalEntry,
    JournalLine,
    StatementPeriod,
)
from ifrs_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ifrs_statements.base import LedgerSnapshot
from ifrs_statements.config import CalculationContext, ReportingConfig
from ifrs_statements.providers import (
    InMemoryChartOfAccounts,
    InMemoryFixedAssetRegister,
    InMemoryLedger,
)
from ifrs_statements.service import ReportingService

COMPANY_ID = UUID("00000000-0000-0000-0000-0000000000c1")


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ifrs_reporting logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            asyncio.run(service.generate_profit_loss(period))
            logs = captured_logs()
            assert any(r["message"] == "profit_loss_generated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ifrs_reporting")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Chart of accounts and ledger
# =============================================================================


def make_account(
    code: str,
    name: str,
    account_type: AccountType,
    category: str = "",
    subcategory: str = "",
) -> Account:
    return Account(
        account_id=uuid4(),
        code=code,
        name=name,
        account_type=account_type,
        category=category,
        subcategory=subcategory,
    )


def make_entry(entry_date: date, *lines: tuple[Account, str, str]) -> JournalEntry:
    """Journal entry from (account, debit, credit) triples."""
    return JournalEntry(
        entry_date=entry_date,
        company_id=COMPANY_ID,
        lines=tuple(
            JournalLine(account_id=a.account_id, debit=Decimal(dr), credit=Decimal(cr))
            for a, dr, cr in lines
        ),
        entry_id=uuid4(),
    )


@dataclass(frozen=True)
class StandardChart:
    cash: Account
    receivables: Account
    plant: Account
    accumulated_depreciation: Account
    payables: Account
    loan: Account
    share_capital: Account
    retained_earnings: Account
    dividends: Account
    sales: Account
    cost_of_goods: Account
    rent: Account
    depreciation: Account
    interest: Account
    income_tax: Account

    @property
    def accounts(self) -> tuple[Account, ...]:
        return tuple(getattr(self, name) for name in self.__dataclass_fields__)


def build_standard_chart() -> StandardChart:
    T = AccountType
    return StandardChart(
        cash=make_account("1000", "Cash at bank", T.ASSET, "Current Assets", "Cash and Cash Equivalents"),
        receivables=make_account("1100", "Trade receivables", T.ASSET, "Current Assets", "Trade Receivables"),
        plant=make_account("1500", "Plant and equipment", T.ASSET, "Non-current Assets", "Property, Plant and Equipment"),
        accumulated_depreciation=make_account("1510", "Accumulated depreciation", T.ASSET, "Non-current Assets"),
        payables=make_account("2000", "Trade payables", T.LIABILITY, "Current Liabilities", "Trade Payables"),
        loan=make_account("2500", "Bank loan", T.LIABILITY, "Non-current Liabilities", "Long-term Debt"),
        share_capital=make_account("3000", "Share capital", T.EQUITY, "Equity", "Share Capital"),
        retained_earnings=make_account("3100", "Retained earnings", T.EQUITY, "Equity", "Retained Earnings"),
        dividends=make_account("3200", "Dividends declared", T.EQUITY, "Equity"),
        sales=make_account("4000", "Sales revenue", T.REVENUE, "Revenue"),
        cost_of_goods=make_account("5000", "Cost of goods sold", T.EXPENSE, "Cost of Sales", "Cost of Sales"),
        rent=make_account("6000", "Rent", T.EXPENSE, "Operating"),
        depreciation=make_account("6100", "Depreciation", T.EXPENSE, "Operating"),
        interest=make_account("7000", "Interest expense", T.EXPENSE, "Finance", "Finance Costs"),
        income_tax=make_account("8000", "Income tax expense", T.EXPENSE, "Tax", "Income Tax Expense"),
    )


def build_standard_entries(c: StandardChart) -> tuple[JournalEntry, ...]:
    return (
        # 2023
        make_entry(date(2023, 1, 2), (c.cash, "50000", "0"), (c.share_capital, "0", "50000")),
        make_entry(date(2023, 6, 30), (c.cash, "30000", "0"), (c.sales, "0", "30000")),
        make_entry(date(2023, 7, 31), (c.cost_of_goods, "10000", "0"), (c.cash, "0", "10000")),
        # 2024
        make_entry(date(2024, 1, 15), (c.plant, "20000", "0"), (c.cash, "0", "20000")),
        make_entry(date(2024, 2, 1), (c.cash, "40000", "0"), (c.loan, "0", "40000")),
        make_entry(
            date(2024, 3, 31),
            (c.receivables, "25000", "0"),
            (c.cash, "95000", "0"),
            (c.sales, "0", "120000"),
        ),
        make_entry(
            date(2024, 4, 30),
            (c.cost_of_goods, "40000", "0"),
            (c.payables, "0", "15000"),
            (c.cash, "0", "25000"),
        ),
        make_entry(date(2024, 6, 30), (c.rent, "12000", "0"), (c.cash, "0", "12000")),
        make_entry(date(2024, 9, 30), (c.interest, "2000", "0"), (c.cash, "0", "2000")),
        make_entry(
            date(2024, 11, 30),
            (c.depreciation, "4000", "0"),
            (c.accumulated_depreciation, "0", "4000"),
        ),
        make_entry(date(2024, 12, 15), (c.income_tax, "5000", "0"), (c.cash, "0", "5000")),
        make_entry(date(2024, 12, 20), (c.dividends, "3000", "0"), (c.cash, "0", "3000")),
        make_entry(date(2024, 12, 31), (c.payables, "5000", "0"), (c.cash, "0", "5000")),
    )


@pytest.fixture
def new_account():
    return make_account


@pytest.fixture
def journal():
    return make_entry


@pytest.fixture
def chart() -> StandardChart:
    return build_standard_chart()


@pytest.fixture
def entries(chart) -> tuple[JournalEntry, ...]:
    return build_standard_entries(chart)


@pytest.fixture
def snapshot(chart, entries) -> LedgerSnapshot:
    return LedgerSnapshot(accounts=chart.accounts, entries=entries)


@pytest.fixture
def period_2024() -> StatementPeriod:
    return StatementPeriod(date(2024, 1, 1), date(2024, 12, 31))


@pytest.fixture
def period_2023() -> StatementPeriod:
    return StatementPeriod(date(2023, 1, 1), date(2023, 12, 31))


@pytest.fixture
def make_context():
    """Build a CalculationContext from the default config, with overrides."""

    def _make(
        period: StatementPeriod,
        prior_period: StatementPeriod | None = None,
        config: ReportingConfig | None = None,
    ) -> CalculationContext:
        return CalculationContext.build(config or ReportingConfig(), period, prior_period)

    return _make


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock()


@pytest.fixture
def make_service(chart, entries, deterministic_clock):
    """ReportingService over in-memory collaborators, standard ledger by default."""

    def _make(
        accounts=None,
        ledger_entries=None,
        fixed_assets=(),
        config: ReportingConfig | None = None,
        **kwargs,
    ) -> ReportingService:
        return ReportingService(
            chart=InMemoryChartOfAccounts(chart.accounts if accounts is None else accounts),
            ledger=InMemoryLedger(entries if ledger_entries is None else ledger_entries),
            fixed_assets=InMemoryFixedAssetRegister(fixed_assets),
            config=config,
            clock=deterministic_clock,
            **kwargs,
        )

    return _make


@pytest.fixture
def service(make_service) -> ReportingService:
    return make_service()
