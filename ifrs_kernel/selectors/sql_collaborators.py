"""
Module: ifrs_kernel.selectors.sql_collaborators
Responsibility: SQL-backed implementations of the reporting collaborator
    ports (ChartOfAccountsProvider, LedgerAccessor, FixedAssetRegister).
Architecture position: Kernel > Selectors.  Adapts the synchronous selectors
    to the async ports.

Each call opens its own session from the factory and runs the query in a
worker thread via ``asyncio.to_thread``.  Sessions are never shared between
calls, so concurrent generation calls cannot observe each other's state.
"""

import asyncio
from collections.abc import Callable
from datetime import date
from typing import TypeVar
from uuid import UUID

from sqlalchemy.orm import Session, sessionmaker

from ifrs_kernel.domain.ledger import Account, FixedAsset, JournalEntry
from ifrs_kernel.selectors.ledger_selector import (
    ChartOfAccountsSelector,
    FixedAssetSelector,
    LedgerSelector,
)

T = TypeVar("T")


class _SessionPerCall:
    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    async def _run(self, query: Callable[[Session], T]) -> T:
        def _in_thread() -> T:
            with self._session_factory() as session:
                return query(session)

        return await asyncio.to_thread(_in_thread)


class SqlChartOfAccountsProvider(_SessionPerCall):
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        include_inactive: bool = True,
    ):
        super().__init__(session_factory)
        self._include_inactive = include_inactive

    async def get_all_accounts(self) -> tuple[Account, ...]:
        return await self._run(
            lambda s: ChartOfAccountsSelector(s).all_accounts(self._include_inactive)
        )


class SqlLedgerAccessor(_SessionPerCall):
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        company_id: UUID | None = None,
    ):
        super().__init__(session_factory)
        self._company_id = company_id

    async def get_entries_for_period(
        self,
        start: date,
        end: date,
    ) -> tuple[JournalEntry, ...]:
        return await self._run(
            lambda s: LedgerSelector(s).entries_between(start, end, self._company_id)
        )


class SqlFixedAssetRegister(_SessionPerCall):
    async def get_fixed_assets(self) -> tuple[FixedAsset, ...]:
        return await self._run(lambda s: FixedAssetSelector(s).all_assets())
