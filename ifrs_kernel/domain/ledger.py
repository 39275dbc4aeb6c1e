"""
Ledger snapshot value objects consumed by the reporting pipeline.

Responsibility:
    Immutable, ORM-free representations of the chart of accounts, journal
    entries, statement periods and fixed assets.  Collaborators (in-memory
    or SQL-backed) convert whatever they store into these types before the
    synchronous pipeline sees them.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Imported by engines and statements.

Invariants enforced:
    - JournalLine debit and credit amounts are never negative.
    - StatementPeriod start_date <= end_date (InvalidPeriodError otherwise).
    - Balanced entries (sum debit == sum credit) are assumed guaranteed by
      the posting side; ``JournalEntry.is_balanced`` is a read-side check.

Failure modes:
    - ValueError on negative line amounts or negative fixed asset cost.
    - InvalidPeriodError on an inverted period.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ifrs_kernel.exceptions import InvalidPeriodError

ZERO = Decimal("0")


class AccountType(str, Enum):
    """Account classification driving the normal-balance sign rule."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def is_debit_normal(self) -> bool:
        """Assets and expenses accumulate debit minus credit."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)

    @property
    def is_balance_sheet(self) -> bool:
        return self in (AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY)


@dataclass(frozen=True)
class Account:
    """One chart-of-accounts row, frozen for the duration of a generation call."""

    account_id: UUID
    code: str
    name: str
    account_type: AccountType
    category: str = ""
    subcategory: str = ""
    ifrs_reference: str | None = None


@dataclass(frozen=True)
class JournalLine:
    account_id: UUID
    debit: Decimal = ZERO
    credit: Decimal = ZERO

    def __post_init__(self) -> None:
        if self.debit < ZERO or self.credit < ZERO:
            raise ValueError(
                f"Journal line amounts must be non-negative: "
                f"debit={self.debit} credit={self.credit}"
            )


@dataclass(frozen=True)
class JournalEntry:
    """A dated, ordered group of journal lines for one company."""

    entry_date: date
    company_id: UUID
    lines: tuple[JournalLine, ...]
    entry_id: UUID | None = None
    description: str = ""

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


@dataclass(frozen=True)
class StatementPeriod:
    """Inclusive reporting date range."""

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise InvalidPeriodError(self.start_date, self.end_date)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def day_before_start(self) -> date:
        """Date at which opening balances are measured."""
        return self.start_date - timedelta(days=1)

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days

    def __str__(self) -> str:
        return f"{self.start_date.isoformat()}..{self.end_date.isoformat()}"


class FixedAssetStatus(str, Enum):
    ACTIVE = "active"
    DISPOSED = "disposed"
    FULLY_DEPRECIATED = "fully_depreciated"


@dataclass(frozen=True)
class FixedAsset:
    """
    Fixed asset register entry.

    Depreciation and disposal results for these assets are not posted to
    the ledger; they are derived per period and folded into the statements
    as synthetic line items.
    """

    asset_id: UUID
    name: str
    acquisition_date: date
    cost: Decimal
    useful_life_years: int
    residual_value: Decimal = ZERO
    accumulated_depreciation: Decimal = ZERO
    status: FixedAssetStatus = FixedAssetStatus.ACTIVE
    disposal_date: date | None = None
    disposal_price: Decimal | None = None
    tags: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.cost < ZERO:
            raise ValueError(f"Fixed asset cost must be non-negative: {self.cost}")
        if self.useful_life_years <= 0:
            raise ValueError(
                f"Useful life must be positive: {self.useful_life_years}"
            )

    @property
    def book_value(self) -> Decimal:
        return self.cost - self.accumulated_depreciation

    @property
    def depreciable_remaining(self) -> Decimal:
        return max(self.book_value - self.residual_value, ZERO)
