"""
ifrs_engines -- Pure calculation engines for statement generation.

Zero I/O, no clock access, deterministic.  The reporting service feeds them
an immutable ledger snapshot and assembles their outputs into statements.
"""

from ifrs_engines.aggregation import BalanceAggregator, signed_amount
from ifrs_engines.classification import (
    ClassificationKeywords,
    SectionClassifier,
    SectionKind,
)
from ifrs_engines.depreciation import (
    DerivedAdjustmentCalculator,
    DerivedAdjustments,
    FixedAssetAdjustmentProvider,
    StraightLineAdjustmentProvider,
)
from ifrs_engines.reconciliation import (
    AmountReconciliation,
    BalanceSheetCash,
    CashReconciliation,
    ReconciliationEngine,
)

__all__ = [
    "AmountReconciliation",
    "BalanceAggregator",
    "BalanceSheetCash",
    "CashReconciliation",
    "ClassificationKeywords",
    "DerivedAdjustmentCalculator",
    "DerivedAdjustments",
    "FixedAssetAdjustmentProvider",
    "ReconciliationEngine",
    "SectionClassifier",
    "SectionKind",
    "StraightLineAdjustmentProvider",
    "signed_amount",
]
