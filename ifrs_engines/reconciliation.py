"""
ifrs_engines.reconciliation -- Cross-statement ReconciliationEngine.

Responsibility:
    Check that the statements agree with one another:

        cash flow      net cash flow == closing cash - opening cash
        profit/equity  profit for the period == profit in equity movements
        equity/BS      closing equity == balance-sheet total equity

Architecture position:
    Engines -- pure, zero I/O.

Invariants enforced:
    - Fixed absolute tolerance of 0.01 for rounding.
    - difference = actual - expected, signed; ``is_reconciled`` compares
      its absolute value against the tolerance.

Failure modes:
    Never raises.  A mismatch is returned as data; the compliance validator
    turns it into an error-severity finding.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ifrs_engines.tracer import traced_engine
from ifrs_kernel.logging_config import get_logger

logger = get_logger("engines.reconciliation")

RECONCILIATION_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class BalanceSheetCash:
    """Cash and cash equivalents at the start and end of the period."""

    opening: Decimal
    closing: Decimal

    @property
    def movement(self) -> Decimal:
        return self.closing - self.opening


@dataclass(frozen=True)
class CashReconciliation:
    net_cash_flow: Decimal
    opening_cash: Decimal
    closing_cash: Decimal
    difference: Decimal
    is_reconciled: bool
    tolerance: Decimal = RECONCILIATION_TOLERANCE

    @property
    def balance_sheet_movement(self) -> Decimal:
        return self.closing_cash - self.opening_cash


@dataclass(frozen=True)
class AmountReconciliation:
    check: str
    expected: Decimal
    actual: Decimal
    difference: Decimal
    is_reconciled: bool


class ReconciliationEngine:
    """Stateless cross-statement checks."""

    def __init__(self, tolerance: Decimal = RECONCILIATION_TOLERANCE):
        self.tolerance = tolerance

    @traced_engine("reconciliation", "1.0", fingerprint_fields=("net_cash_flow", "cash"))
    def reconcile(self, net_cash_flow: Decimal, cash: BalanceSheetCash) -> CashReconciliation:
        difference = net_cash_flow - cash.movement
        reconciled = abs(difference) < self.tolerance
        if not reconciled:
            logger.warning(
                "cash_reconciliation_failed",
                extra={
                    "net_cash_flow": str(net_cash_flow),
                    "opening_cash": str(cash.opening),
                    "closing_cash": str(cash.closing),
                    "difference": str(difference),
                },
            )
        return CashReconciliation(
            net_cash_flow=net_cash_flow,
            opening_cash=cash.opening,
            closing_cash=cash.closing,
            difference=difference,
            is_reconciled=reconciled,
            tolerance=self.tolerance,
        )

    def reconcile_profit_to_equity(
        self,
        profit_for_period: Decimal,
        equity_profit: Decimal,
    ) -> AmountReconciliation:
        return self._compare("profit_to_equity", profit_for_period, equity_profit)

    def reconcile_equity_to_balance_sheet(
        self,
        equity_closing: Decimal,
        balance_sheet_equity: Decimal,
    ) -> AmountReconciliation:
        return self._compare("equity_to_balance_sheet", balance_sheet_equity, equity_closing)

    def _compare(self, check: str, expected: Decimal, actual: Decimal) -> AmountReconciliation:
        difference = actual - expected
        reconciled = abs(difference) < self.tolerance
        if not reconciled:
            logger.warning(
                "statement_reconciliation_failed",
                extra={
                    "check": check,
                    "expected": str(expected),
                    "actual": str(actual),
                    "difference": str(difference),
                },
            )
        return AmountReconciliation(
            check=check,
            expected=expected,
            actual=actual,
            difference=difference,
            is_reconciled=reconciled,
        )
