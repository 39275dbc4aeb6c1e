"""
Queries over the chart of accounts, journal entries and the fixed asset
register.  Empty tuples when nothing matches; database errors propagate
unchanged to the SQL collaborators.
"""

from datetime import date
from uuid import UUID

from sqlalchemy.orm import selectinload

from ifrs_kernel.domain.ledger import Account, FixedAsset, JournalEntry
from ifrs_kernel.models.account import AccountModel
from ifrs_kernel.models.fixed_asset import FixedAssetModel
from ifrs_kernel.models.journal import JournalEntryModel
from ifrs_kernel.selectors.base import BaseSelector


class ChartOfAccountsSelector(BaseSelector[AccountModel]):
    model = AccountModel

    def all_accounts(self, include_inactive: bool = True) -> tuple[Account, ...]:
        """Accounts in chart order: display_order, then code."""
        stmt = self.query().order_by(AccountModel.display_order, AccountModel.code)
        if not include_inactive:
            stmt = stmt.where(AccountModel.is_active.is_(True))
        return self.fetch(stmt, "chart_of_accounts_loaded")


class LedgerSelector(BaseSelector[JournalEntryModel]):
    model = JournalEntryModel

    def entries_between(
        self,
        start: date,
        end: date,
        company_id: UUID | None = None,
    ) -> tuple[JournalEntry, ...]:
        """
        Journal entries dated within [start, end], lines loaded eagerly.

        Ordered by date then id, so an unchanged ledger always yields the
        same snapshot.
        """
        stmt = (
            self.query()
            .options(selectinload(JournalEntryModel.lines))
            .where(JournalEntryModel.entry_date.between(start, end))
            .order_by(JournalEntryModel.entry_date, JournalEntryModel.id)
        )
        if company_id is not None:
            stmt = stmt.where(JournalEntryModel.company_id == company_id)
        return self.fetch(
            stmt,
            "journal_entries_loaded",
            start=start.isoformat(),
            end=end.isoformat(),
        )


class FixedAssetSelector(BaseSelector[FixedAssetModel]):
    model = FixedAssetModel

    def all_assets(self) -> tuple[FixedAsset, ...]:
        stmt = self.query().order_by(FixedAssetModel.acquisition_date, FixedAssetModel.name)
        return self.fetch(stmt, "fixed_assets_loaded")
