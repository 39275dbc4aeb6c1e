"""
ProfitLossBuilder -- Statement of Profit or Loss (IAS 1.81A-1.105).

Sections are built from period activity (not cumulative positions).
Derived adjustments from the fixed asset register are appended as synthetic
items: depreciation to operating expenses, disposal gains to finance income,
disposal losses to finance costs, each only when strictly positive.

    gross profit       = revenue - cost of sales
    operating profit   = gross profit - operating expenses
    profit before tax  = operating profit + finance income - finance costs
    profit for period  = profit before tax - income tax expense

Every metric carries margin = metric / revenue x 100, zero when revenue is
zero.
"""

from __future__ import annotations

from decimal import Decimal

from ifrs_engines.arithmetic import margin_percent, percent_change
from ifrs_engines.classification import SectionKind
from ifrs_engines.depreciation import DerivedAdjustments
from ifrs_kernel.logging_config import get_logger
from ifrs_statements.base import LedgerSnapshot, StatementBuilder
from ifrs_statements.config import CalculationContext
from ifrs_statements.models import (
    FinancialStatementSection,
    ProfitLossData,
    StatementMetric,
    StatementType,
)
from ifrs_statements.sections import LineAmount, SectionBuilder, account_lines

logger = get_logger("statements.profit_loss")

DEPRECIATION_ITEM = ("depreciation-expense", "Depreciation and amortization")
DISPOSAL_GAIN_ITEM = ("disposal-gain", "Gain on disposal of property, plant and equipment")
DISPOSAL_LOSS_ITEM = ("disposal-loss", "Loss on disposal of property, plant and equipment")

_SECTIONS = (
    # (attribute, kind, code, name, ifrs reference)
    ("revenue", SectionKind.REVENUE, "REV", "Revenue", "IAS 1.82(a)"),
    ("cost_of_sales", SectionKind.COST_OF_SALES, "COS", "Cost of sales", "IAS 1.103"),
    ("operating_expenses", SectionKind.OPERATING_EXPENSES, "OPEX", "Operating expenses", "IAS 1.99"),
    ("finance_income", SectionKind.FINANCE_INCOME, "FIN_INC", "Finance income", "IAS 1.82(a)"),
    ("finance_costs", SectionKind.FINANCE_COSTS, "FIN_COST", "Finance costs", "IAS 1.82(b)"),
    ("tax_expense", SectionKind.TAX_EXPENSE, "TAX", "Income tax expense", "IAS 1.82(d)"),
)

_METRICS = (
    ("GP", "Gross profit", None),
    ("OP", "Operating profit", None),
    ("PBT", "Profit before tax", "IAS 1.82"),
    ("PFP", "Profit for the period", "IAS 1.81A(a)"),
)


class ProfitLossBuilder(StatementBuilder):
    statement_type = StatementType.PROFIT_LOSS
    title = "Statement of Profit or Loss"

    def build(self, snapshot: LedgerSnapshot, context: CalculationContext) -> ProfitLossData:
        current = self.activity(snapshot, context.current_period)
        prior = (
            self.activity(snapshot, context.prior_period)
            if context.prior_period is not None
            else None
        )
        adjustments = self.derived(snapshot, context.current_period)
        prior_adjustments = (
            self.derived(snapshot, context.prior_period)
            if context.prior_period is not None
            else None
        )

        sb = self.section_builder(context)
        sections = {
            attr: sb.section(
                code,
                name,
                account_lines(self.accounts_in(snapshot, kind), current, prior),
                ifrs_reference=ref,
            )
            for attr, kind, code, name, ref in _SECTIONS
        }

        sections["operating_expenses"] = sb.with_derived_item(
            sections["operating_expenses"],
            _derived_line(DEPRECIATION_ITEM, adjustments, prior_adjustments, "depreciation", "IAS 16.62"),
        )
        sections["finance_income"] = sb.with_derived_item(
            sections["finance_income"],
            _derived_line(DISPOSAL_GAIN_ITEM, adjustments, prior_adjustments, "disposal_gain", "IAS 16.68"),
        )
        sections["finance_costs"] = sb.with_derived_item(
            sections["finance_costs"],
            _derived_line(DISPOSAL_LOSS_ITEM, adjustments, prior_adjustments, "disposal_loss", "IAS 16.68"),
        )

        revenue = sections["revenue"]
        current_chain = _profit_chain(sections, lambda s: s.total)
        prior_chain = (
            _profit_chain(sections, lambda s: s.prior_total)
            if context.has_prior_period
            else (None, None, None, None)
        )
        metrics = [
            _metric(sb, code, name, cur, pri, revenue, ref)
            for (code, name, ref), cur, pri in zip(_METRICS, current_chain, prior_chain)
        ]

        data = ProfitLossData(
            **sections,
            gross_profit=metrics[0],
            operating_profit=metrics[1],
            profit_before_tax=metrics[2],
            profit_for_period=metrics[3],
            adjustments=adjustments,
        )

        logger.info(
            "profit_loss_built",
            extra={
                "period": str(context.current_period),
                "revenue": str(revenue.total),
                "gross_profit": str(data.gross_profit.current_period),
                "profit_for_period": str(data.profit_for_period.current_period),
                "has_comparatives": context.has_prior_period,
            },
        )
        return data


def _derived_line(
    item: tuple[str, str],
    current: DerivedAdjustments,
    prior: DerivedAdjustments | None,
    field_name: str,
    ifrs_reference: str,
) -> LineAmount:
    code, name = item
    return LineAmount(
        code=code,
        name=name,
        current=getattr(current, field_name),
        prior=getattr(prior, field_name) if prior is not None else None,
        ifrs_reference=ifrs_reference,
    )


def _profit_chain(sections: dict[str, FinancialStatementSection], total) -> tuple[Decimal, ...]:
    gross = total(sections["revenue"]) - total(sections["cost_of_sales"])
    operating = gross - total(sections["operating_expenses"])
    before_tax = (
        operating + total(sections["finance_income"]) - total(sections["finance_costs"])
    )
    for_period = before_tax - total(sections["tax_expense"])
    return gross, operating, before_tax, for_period


def _metric(
    sb: SectionBuilder,
    code: str,
    name: str,
    current: Decimal,
    prior: Decimal | None,
    revenue: FinancialStatementSection,
    ifrs_reference: str | None,
) -> StatementMetric:
    precision = sb.context.rounding_precision
    variance = (current - prior) if prior is not None else None
    return StatementMetric(
        code=code,
        name=name,
        current_period=current,
        margin=margin_percent(current, revenue.total, precision),
        formatted_current=sb.fmt(current),
        prior_period=prior,
        prior_margin=(
            margin_percent(prior, revenue.prior_total, precision)
            if prior is not None
            else None
        ),
        variance=variance,
        variance_percent=percent_change(variance, prior, precision) if variance is not None else None,
        formatted_prior=sb.fmt(prior),
        ifrs_reference=ifrs_reference,
    )
