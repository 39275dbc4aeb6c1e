"""Read-only selectors and the SQL-backed reporting collaborators."""

from ifrs_kernel.selectors.ledger_selector import (
    ChartOfAccountsSelector,
    FixedAssetSelector,
    LedgerSelector,
)
from ifrs_kernel.selectors.sql_collaborators import (
    SqlChartOfAccountsProvider,
    SqlFixedAssetRegister,
    SqlLedgerAccessor,
)

__all__ = [
    "ChartOfAccountsSelector",
    "FixedAssetSelector",
    "LedgerSelector",
    "SqlChartOfAccountsProvider",
    "SqlFixedAssetRegister",
    "SqlLedgerAccessor",
]
