"""
In-memory reporting collaborators.

Hold an immutable copy of their data and answer every call from it, so tests
and embedding callers can drive ReportingService without a database.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from ifrs_kernel.domain.ledger import Account, FixedAsset, JournalEntry


class InMemoryChartOfAccounts:
    def __init__(self, accounts: Iterable[Account]):
        self._accounts = tuple(accounts)

    async def get_all_accounts(self) -> tuple[Account, ...]:
        return self._accounts


class InMemoryLedger:
    def __init__(self, entries: Iterable[JournalEntry]):
        self._entries = tuple(entries)

    async def get_entries_for_period(self, start: date, end: date) -> tuple[JournalEntry, ...]:
        return tuple(e for e in self._entries if start <= e.entry_date <= end)


class InMemoryFixedAssetRegister:
    def __init__(self, assets: Iterable[FixedAsset] = ()):
        self._assets = tuple(assets)

    async def get_fixed_assets(self) -> tuple[FixedAsset, ...]:
        return self._assets
