"""ORM read models for the SQL-backed reporting collaborators."""

from ifrs_kernel.models.account import AccountModel
from ifrs_kernel.models.fixed_asset import FixedAssetModel
from ifrs_kernel.models.journal import JournalEntryModel, JournalLineModel

__all__ = [
    "AccountModel",
    "FixedAssetModel",
    "JournalEntryModel",
    "JournalLineModel",
]
