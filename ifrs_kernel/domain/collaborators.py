"""
Collaborator ports for statement generation.

Contract:
    Every method is a coroutine.  These calls are the only suspension points
    in a generation call; the reporting service issues them concurrently and
    awaits all three before the synchronous pipeline runs.  Implementations
    must re-query on every call (no implicit caching) and may raise any
    exception, which the service wraps in a StructuralError subclass.

Architecture: ifrs_kernel/domain.  No I/O here, only the shapes.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Protocol, runtime_checkable

from ifrs_kernel.domain.ledger import Account, FixedAsset, JournalEntry


@runtime_checkable
class ChartOfAccountsProvider(Protocol):
    async def get_all_accounts(self) -> Sequence[Account]:
        """Return every account in chart order."""
        ...


@runtime_checkable
class LedgerAccessor(Protocol):
    async def get_entries_for_period(
        self,
        start: date,
        end: date,
    ) -> Sequence[JournalEntry]:
        """Return entries dated within [start, end], inclusive."""
        ...


@runtime_checkable
class FixedAssetRegister(Protocol):
    async def get_fixed_assets(self) -> Sequence[FixedAsset]:
        """Return the fixed asset register used for derived adjustments."""
        ...
