"""
Headline figures and highlights for a FinancialStatementPackage.

Liquidity is only assessed when there are current liabilities; a balance
sheet without them has no meaningful current ratio.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

from ifrs_engines.arithmetic import HUNDRED, ZERO, quantize, safe_divide
from ifrs_statements.models import (
    BalanceSheetData,
    CashFlowData,
    FinancialSummary,
    HighlightStatus,
    ProfitLossData,
    SummaryHighlight,
)

ONE = Decimal("1")

STRONG_CURRENT_RATIO = Decimal("2")
WEAK_CURRENT_RATIO = Decimal("1")


def _ratio(numerator: Decimal, denominator: Decimal, scale: Decimal = ONE) -> Decimal:
    if denominator <= ZERO:
        return ZERO
    return quantize(safe_divide(numerator, denominator, default=ZERO) * scale, 2)


def summarize(
    profit_loss: ProfitLossData,
    balance_sheet: BalanceSheetData,
    cash_flow: CashFlowData,
    fmt: Callable[[Decimal], str | None],
) -> FinancialSummary:
    """Key metrics and profitability, liquidity and cash generation highlights."""
    net_income = profit_loss.profit_for_period.current_period
    current_liabilities = balance_sheet.current_liabilities.total
    current_ratio = _ratio(balance_sheet.current_assets.total, current_liabilities)
    operating = cash_flow.operating_cash_flow

    highlights: list[SummaryHighlight] = []
    if net_income > ZERO:
        highlights.append(
            SummaryHighlight("Profitability", HighlightStatus.POSITIVE, f"Net income of {fmt(net_income)}")
        )
    elif net_income < ZERO:
        highlights.append(
            SummaryHighlight("Profitability", HighlightStatus.NEGATIVE, f"Net loss of {fmt(-net_income)}")
        )

    if current_liabilities > ZERO:
        if current_ratio > STRONG_CURRENT_RATIO:
            highlights.append(
                SummaryHighlight(
                    "Liquidity",
                    HighlightStatus.POSITIVE,
                    f"Strong liquidity with current ratio of {current_ratio}",
                )
            )
        elif current_ratio < WEAK_CURRENT_RATIO:
            highlights.append(
                SummaryHighlight(
                    "Liquidity",
                    HighlightStatus.WARNING,
                    f"Liquidity concern with current ratio of {current_ratio}",
                )
            )

    if operating > ZERO:
        highlights.append(
            SummaryHighlight(
                "Cash Generation",
                HighlightStatus.POSITIVE,
                f"Positive operating cash flow of {fmt(operating)}",
            )
        )
    elif operating < ZERO:
        highlights.append(
            SummaryHighlight(
                "Cash Generation",
                HighlightStatus.WARNING,
                f"Negative operating cash flow of {fmt(-operating)}",
            )
        )

    return FinancialSummary(
        total_assets=balance_sheet.total_assets,
        total_liabilities=balance_sheet.total_liabilities,
        total_equity=balance_sheet.total_equity,
        revenue=profit_loss.revenue.total,
        net_income=net_income,
        operating_cash_flow=operating,
        current_ratio=current_ratio,
        debt_to_equity=_ratio(balance_sheet.total_liabilities, balance_sheet.total_equity),
        return_on_assets=_ratio(net_income, balance_sheet.total_assets, HUNDRED),
        return_on_equity=_ratio(net_income, balance_sheet.total_equity, HUNDRED),
        highlights=tuple(highlights),
    )
