"""
Pure domain layer.

Value objects with NO dependencies on the ORM, the database or I/O.
All domain objects are immutable and deterministic.
"""

from ifrs_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ifrs_kernel.domain.ledger import (
    Account,
    AccountType,
    FixedAsset,
    FixedAssetStatus,
    JournalEntry,
    JournalLine,
    StatementPeriod,
)

__all__ = [
    "Account",
    "AccountType",
    "Clock",
    "DeterministicClock",
    "FixedAsset",
    "FixedAssetStatus",
    "JournalEntry",
    "JournalLine",
    "StatementPeriod",
    "SystemClock",
]
