"""
Module: ifrs_kernel.models.account
Responsibility: ORM persistence for the chart of accounts read by
    SqlChartOfAccountsProvider.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ only.
"""

from sqlalchemy import Boolean, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ifrs_kernel.db.base import Base
from ifrs_kernel.domain.ledger import Account, AccountType


class AccountModel(Base):
    """
    Chart-of-accounts row.

    ``display_order`` preserves chart ordering, which the section classifier
    mirrors in every statement section.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("code", name="uq_account_code"),
        Index("idx_account_type", "account_type"),
    )

    code: Mapped[str] = mapped_column(String(50), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    account_type: Mapped[AccountType] = mapped_column(String(20), nullable=False)

    # Free-text classification used by the name/category heuristics
    category: Mapped[str] = mapped_column(String(100), default="", nullable=False)

    subcategory: Mapped[str] = mapped_column(String(100), default="", nullable=False)

    ifrs_reference: Mapped[str | None] = mapped_column(String(50), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<AccountModel {self.code}: {self.name}>"

    def to_domain(self) -> Account:
        return Account(
            account_id=self.id,
            code=self.code,
            name=self.name,
            account_type=AccountType(self.account_type),
            category=self.category or "",
            subcategory=self.subcategory or "",
            ifrs_reference=self.ifrs_reference,
        )
