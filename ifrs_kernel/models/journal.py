"""
Module: ifrs_kernel.models.journal
Responsibility: ORM persistence for journal entries and lines, read by
    SqlLedgerAccessor.  Posting is out of scope for reporting; these tables
    are populated by the ledger side and only queried here.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ only.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ifrs_kernel.db.base import Base
from ifrs_kernel.domain.ledger import JournalEntry, JournalLine


class JournalEntryModel(Base):
    __tablename__ = "journal_entries"

    __table_args__ = (
        Index("idx_journal_entry_company_date", "company_id", "entry_date"),
    )

    company_id: Mapped[UUID] = mapped_column(nullable=False)

    entry_date: Mapped[date] = mapped_column(nullable=False)

    description: Mapped[str] = mapped_column(String(500), default="", nullable=False)

    lines: Mapped[list["JournalLineModel"]] = relationship(
        back_populates="entry",
        order_by="JournalLineModel.line_seq",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<JournalEntryModel {self.id} {self.entry_date}>"

    def to_domain(self) -> JournalEntry:
        return JournalEntry(
            entry_date=self.entry_date,
            company_id=self.company_id,
            lines=tuple(line.to_domain() for line in self.lines),
            entry_id=self.id,
            description=self.description or "",
        )


class JournalLineModel(Base):
    """
    One debit or credit against an account.

    Debit and credit are separate non-negative columns; the sign rule for
    the owning account type is applied by the BalanceAggregator, never here.
    """

    __tablename__ = "journal_lines"

    __table_args__ = (
        Index("idx_journal_line_entry", "journal_entry_id"),
        Index("idx_journal_line_account", "account_id"),
    )

    journal_entry_id: Mapped[UUID] = mapped_column(
        ForeignKey("journal_entries.id"),
        nullable=False,
    )

    # No FK: lines referencing accounts missing from the chart are tolerated
    account_id: Mapped[UUID] = mapped_column(nullable=False)

    debit: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)

    credit: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)

    line_seq: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    entry: Mapped["JournalEntryModel"] = relationship(back_populates="lines")

    def to_domain(self) -> JournalLine:
        return JournalLine(
            account_id=self.account_id,
            debit=Decimal(self.debit),
            credit=Decimal(self.credit),
        )
