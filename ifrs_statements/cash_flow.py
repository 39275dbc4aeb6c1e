"""
CashFlowBuilder -- Statement of Cash Flows (IAS 7).

Balance-sheet movements are position at period end minus position the day
before the period starts.  Ledger figures only: derived adjustments from the
fixed asset register are non-cash and net to zero here.

Indirect method (IAS 7.18(b)):
    NP      profit for the period (all revenue - all expense)
    DEP     depreciation and amortization added back
    WC_REC  (increase)/decrease in trade receivables
    WC_PAY  increase/(decrease) in trade payables

Direct method (IAS 7.18(a)):
    CFO_CUST  revenue - change in receivables
    CFO_SUPP  -(expenses other than depreciation, interest and tax)
              + change in payables
    CFO_INT   interest paid
    CFO_TAX   income taxes paid

Both methods give the same operating total.  Investing (CFI_PPE, CFI_INV)
and financing (CFF_DEBT, CFF_EQUITY, CFF_DIV) are shared.  Net cash flow is
reconciled against the movement in cash and cash equivalents.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from ifrs_engines.aggregation import total_for
from ifrs_engines.classification import SectionKind
from ifrs_engines.reconciliation import BalanceSheetCash, ReconciliationEngine
from ifrs_kernel.domain.ledger import Account, AccountType, StatementPeriod
from ifrs_kernel.logging_config import get_logger
from ifrs_statements.base import LedgerSnapshot, StatementBuilder
from ifrs_statements.config import CalculationContext
from ifrs_statements.models import CashFlowData, CashFlowMethod, StatementType
from ifrs_statements.sections import LineAmount

logger = get_logger("statements.cash_flow")

ZERO = Decimal("0")


@dataclass(frozen=True)
class _CashFigures:
    """Every amount the cash flow lines are derived from, for one period."""

    revenue: Decimal
    expenses: Decimal
    depreciation: Decimal
    interest: Decimal
    tax: Decimal
    receivables_change: Decimal
    payables_change: Decimal
    ppe_change: Decimal
    investments_change: Decimal
    debt_change: Decimal
    share_capital_change: Decimal
    dividends_change: Decimal
    opening_cash: Decimal
    closing_cash: Decimal

    @property
    def net_profit(self) -> Decimal:
        return self.revenue - self.expenses

    @property
    def other_expenses(self) -> Decimal:
        return self.expenses - self.depreciation - self.interest - self.tax

    @property
    def working_capital(self) -> Decimal:
        return -self.receivables_change + self.payables_change


class CashFlowBuilder(StatementBuilder):
    statement_type = StatementType.CASH_FLOW

    def __init__(
        self,
        *args,
        method: CashFlowMethod = CashFlowMethod.INDIRECT,
        reconciliation: ReconciliationEngine | None = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.method = method
        self.reconciliation = reconciliation or ReconciliationEngine()

    @property
    def title(self) -> str:
        return f"Statement of Cash Flows ({self.method.value.capitalize()} Method)"

    def build(self, snapshot: LedgerSnapshot, context: CalculationContext) -> CashFlowData:
        cur = self._figures(snapshot, context.current_period)
        pri = (
            self._figures(snapshot, context.prior_period)
            if context.prior_period is not None
            else None
        )

        if self.method is CashFlowMethod.DIRECT:
            operating_lines = _paired(_direct_lines, cur, pri)
        else:
            operating_lines = _paired(_indirect_lines, cur, pri)

        sb = self.section_builder(context)
        operating = sb.section(
            "CFO",
            "Cash flows from operating activities",
            operating_lines,
            ifrs_reference="IAS 7.13",
        )
        investing = sb.section(
            "CFI",
            "Cash flows from investing activities",
            _paired(_investing_lines, cur, pri),
            ifrs_reference="IAS 7.16",
        )
        financing = sb.section(
            "CFF",
            "Cash flows from financing activities",
            _paired(_financing_lines, cur, pri),
            ifrs_reference="IAS 7.17",
        )
        supplementary = sb.section(
            "SUPP",
            "Supplementary disclosures",
            _paired(_supplementary_lines, cur, pri),
        )

        net_cash_flow = operating.total + investing.total + financing.total
        prior_net = (
            operating.prior_total + investing.prior_total + financing.prior_total
            if pri is not None
            else None
        )
        reconciliation = self.reconciliation.reconcile(
            net_cash_flow=net_cash_flow,
            cash=BalanceSheetCash(opening=cur.opening_cash, closing=cur.closing_cash),
        )

        data = CashFlowData(
            method=self.method,
            operating_activities=operating,
            investing_activities=investing,
            financing_activities=financing,
            supplementary_disclosures=supplementary,
            net_profit=cur.net_profit,
            non_cash_adjustments=cur.depreciation,
            working_capital_changes=cur.working_capital,
            net_cash_flow=net_cash_flow,
            opening_cash=cur.opening_cash,
            closing_cash=cur.closing_cash,
            reconciliation=reconciliation,
            prior_net_cash_flow=prior_net,
        )

        logger.info(
            "cash_flow_built",
            extra={
                "method": self.method.value,
                "period": str(context.current_period),
                "operating": str(operating.total),
                "investing": str(investing.total),
                "financing": str(financing.total),
                "net_cash_flow": str(net_cash_flow),
                "is_reconciled": reconciliation.is_reconciled,
            },
        )
        return data

    def _figures(self, snapshot: LedgerSnapshot, period: StatementPeriod) -> _CashFigures:
        activity = self.activity(snapshot, period)
        opening = self.position(snapshot, period.day_before_start)
        closing = self.position(snapshot, period.end_date)

        def change(accounts) -> Decimal:
            return total_for(closing, accounts) - total_for(opening, accounts)

        def of_kind(kind: SectionKind, exclude: tuple[Account, ...] = ()) -> tuple[Account, ...]:
            excluded = {a.account_id for a in exclude}
            return tuple(a for a in self.accounts_in(snapshot, kind) if a.account_id not in excluded)

        expenses = tuple(a for a in snapshot.accounts if a.account_type is AccountType.EXPENSE)
        revenue = tuple(a for a in snapshot.accounts if a.account_type is AccountType.REVENUE)

        # Expense partition: depreciation, then interest, then tax, then the rest
        depreciation = of_kind(SectionKind.DEPRECIATION)
        interest = of_kind(SectionKind.INTEREST_EXPENSE, exclude=depreciation)
        tax = of_kind(SectionKind.TAX_EXPENSE, exclude=depreciation + interest)

        cash = of_kind(SectionKind.CASH)
        ppe = of_kind(SectionKind.PROPERTY_PLANT_EQUIPMENT, exclude=cash)
        investments = of_kind(SectionKind.INVESTMENTS, exclude=cash + ppe)
        receivables = of_kind(SectionKind.RECEIVABLES, exclude=cash)
        debt = of_kind(SectionKind.DEBT)
        payables = of_kind(SectionKind.PAYABLES, exclude=debt)

        return _CashFigures(
            revenue=total_for(activity, revenue),
            expenses=total_for(activity, expenses),
            depreciation=total_for(activity, depreciation),
            interest=total_for(activity, interest),
            tax=total_for(activity, tax),
            receivables_change=change(receivables),
            payables_change=change(payables),
            ppe_change=change(ppe),
            investments_change=change(investments),
            debt_change=change(debt),
            share_capital_change=change(of_kind(SectionKind.SHARE_CAPITAL)),
            dividends_change=change(of_kind(SectionKind.DIVIDENDS)),
            opening_cash=total_for(opening, cash),
            closing_cash=total_for(closing, cash),
        )


# =========================================================================
# Line definitions: (code, name, amount, ifrs reference) per period
# =========================================================================


def _paired(define, current: _CashFigures, prior: _CashFigures | None) -> list[LineAmount]:
    """Evaluate a line definition for both periods and pair lines by code."""
    prior_amounts: Mapping[str, Decimal] = (
        {code: amount for code, _, amount, _ in define(prior)} if prior is not None else {}
    )
    return [
        LineAmount(
            code=code,
            name=name,
            current=amount,
            prior=prior_amounts.get(code, ZERO) if prior is not None else None,
            ifrs_reference=ref,
        )
        for code, name, amount, ref in define(current)
    ]


def _indirect_lines(f: _CashFigures):
    return [
        ("NP", "Profit for the period", f.net_profit, "IAS 7.18(b)"),
        ("DEP", "Depreciation and amortization", f.depreciation, "IAS 7.20(b)"),
        (
            "WC_REC",
            "(Increase)/decrease in trade receivables",
            -f.receivables_change,
            "IAS 7.20(a)",
        ),
        ("WC_PAY", "Increase/(decrease) in trade payables", f.payables_change, "IAS 7.20(a)"),
    ]


def _direct_lines(f: _CashFigures):
    return [
        (
            "CFO_CUST",
            "Cash receipts from customers",
            f.revenue - f.receivables_change,
            "IAS 7.14(a)",
        ),
        (
            "CFO_SUPP",
            "Cash paid to suppliers and employees",
            -f.other_expenses + f.payables_change,
            "IAS 7.14(c)",
        ),
        ("CFO_INT", "Interest paid", -f.interest, "IAS 7.31"),
        ("CFO_TAX", "Income taxes paid", -f.tax, "IAS 7.35"),
    ]


def _investing_lines(f: _CashFigures):
    return [
        (
            "CFI_PPE",
            "Purchase of property, plant and equipment"
            if f.ppe_change >= ZERO
            else "Proceeds from sale of property, plant and equipment",
            -f.ppe_change,
            "IAS 7.16(a)" if f.ppe_change >= ZERO else "IAS 7.16(b)",
        ),
        (
            "CFI_INV",
            "Purchase of investments"
            if f.investments_change >= ZERO
            else "Proceeds from sale of investments",
            -f.investments_change,
            "IAS 7.16(c)" if f.investments_change >= ZERO else "IAS 7.16(d)",
        ),
    ]


def _financing_lines(f: _CashFigures):
    return [
        (
            "CFF_DEBT",
            "Proceeds from borrowings" if f.debt_change >= ZERO else "Repayment of borrowings",
            f.debt_change,
            "IAS 7.17(c)" if f.debt_change >= ZERO else "IAS 7.17(d)",
        ),
        (
            "CFF_EQUITY",
            "Proceeds from issue of share capital"
            if f.share_capital_change >= ZERO
            else "Payments to redeem shares",
            f.share_capital_change,
            "IAS 7.17(a)" if f.share_capital_change >= ZERO else "IAS 7.17(b)",
        ),
        ("CFF_DIV", "Dividends paid", f.dividends_change, "IAS 7.31"),
    ]


def _supplementary_lines(f: _CashFigures):
    return [
        ("INT_PAID", "Interest paid", f.interest, "IAS 7.31"),
        ("TAX_PAID", "Income taxes paid", f.tax, "IAS 7.35"),
    ]
