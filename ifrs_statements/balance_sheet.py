"""
BalanceSheetBuilder -- Statement of Financial Position (IAS 1.54-1.80A).

Positions are cumulative from ledger inception to the period end.  Revenue
and expense accounts that have not been closed to retained earnings are
carried as one equity line, "Accumulated profit or loss", so the statement
balances whether or not the books have been closed.

Register adjustments accumulated up to the reporting date are mirrored on
both sides: the asset side gets synthetic non-current lines (accumulated
depreciation reduces carrying amounts, disposal results adjust them), and
the same net effect flows into the accumulated profit line.  Assets then
equal liabilities plus equity after adjustments, and each year-end position
is the opening position of the next year.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from uuid import UUID

from ifrs_engines.aggregation import total_for
from ifrs_engines.classification import SectionKind
from ifrs_engines.depreciation import DerivedAdjustments
from ifrs_kernel.logging_config import get_logger
from ifrs_statements.base import LedgerSnapshot, StatementBuilder
from ifrs_statements.config import CalculationContext
from ifrs_statements.models import BalanceSheetData, StatementType
from ifrs_statements.sections import LineAmount, account_lines

logger = get_logger("statements.balance_sheet")

ZERO = Decimal("0")

ACCUMULATED_PROFIT = ("accumulated-profit", "Accumulated profit or loss")
REGISTER_DEPRECIATION = (
    "register-depreciation",
    "Accumulated depreciation (fixed asset register)",
)
REGISTER_DISPOSALS = (
    "register-disposals",
    "Disposal adjustments (fixed asset register)",
)


class BalanceSheetBuilder(StatementBuilder):
    statement_type = StatementType.BALANCE_SHEET
    title = "Statement of Financial Position"

    def build(self, snapshot: LedgerSnapshot, context: CalculationContext) -> BalanceSheetData:
        current_period = context.current_period
        prior_period = context.prior_period

        current = self.position(snapshot, current_period.end_date)
        prior = self.position(snapshot, prior_period.end_date) if prior_period else None
        adjustments = self.derived_to(snapshot, current_period.end_date)
        prior_adjustments = (
            self.derived_to(snapshot, prior_period.end_date) if prior_period else None
        )

        sb = self.section_builder(context)

        def lines(kind: SectionKind) -> list[LineAmount]:
            return account_lines(self.accounts_in(snapshot, kind), current, prior)

        non_current_lines = lines(SectionKind.NON_CURRENT_ASSETS)
        non_current_lines.extend(_register_lines(adjustments, prior_adjustments))

        equity_lines = lines(SectionKind.EQUITY)
        equity_lines.append(
            LineAmount(
                code=ACCUMULATED_PROFIT[0],
                name=ACCUMULATED_PROFIT[1],
                current=self._accumulated_profit(snapshot, current, adjustments),
                prior=(
                    self._accumulated_profit(snapshot, prior, prior_adjustments)
                    if prior is not None
                    else None
                ),
                ifrs_reference="IAS 1.54(r)",
            )
        )

        non_current_assets = sb.section(
            "NCA", "Non-current assets", non_current_lines, ifrs_reference="IAS 1.66"
        )
        current_assets = sb.section(
            "CA", "Current assets", lines(SectionKind.CURRENT_ASSETS), ifrs_reference="IAS 1.66"
        )
        current_liabilities = sb.section(
            "CL",
            "Current liabilities",
            lines(SectionKind.CURRENT_LIABILITIES),
            ifrs_reference="IAS 1.69",
        )
        non_current_liabilities = sb.section(
            "NCL",
            "Non-current liabilities",
            lines(SectionKind.NON_CURRENT_LIABILITIES),
            ifrs_reference="IAS 1.69",
        )
        equity = sb.section("EQ", "Equity", equity_lines, ifrs_reference="IAS 1.54(q)")

        cash_accounts = self.accounts_in(snapshot, SectionKind.CASH)
        has_prior = prior is not None

        data = BalanceSheetData(
            as_of=current_period.end_date,
            non_current_assets=non_current_assets,
            current_assets=current_assets,
            current_liabilities=current_liabilities,
            non_current_liabilities=non_current_liabilities,
            equity=equity,
            total_assets=non_current_assets.total + current_assets.total,
            total_liabilities=current_liabilities.total + non_current_liabilities.total,
            total_equity=equity.total,
            cash_and_equivalents=total_for(current, cash_accounts),
            prior_as_of=prior_period.end_date if prior_period else None,
            prior_total_assets=(
                non_current_assets.prior_total + current_assets.prior_total if has_prior else None
            ),
            prior_total_liabilities=(
                current_liabilities.prior_total + non_current_liabilities.prior_total
                if has_prior
                else None
            ),
            prior_total_equity=equity.prior_total if has_prior else None,
            prior_cash_and_equivalents=total_for(prior, cash_accounts) if has_prior else None,
            adjustments=adjustments,
        )

        log = logger.info if data.is_balanced else logger.warning
        log(
            "balance_sheet_built",
            extra={
                "as_of": data.as_of.isoformat(),
                "total_assets": str(data.total_assets),
                "total_liabilities": str(data.total_liabilities),
                "total_equity": str(data.total_equity),
                "is_balanced": data.is_balanced,
            },
        )
        return data

    def _accumulated_profit(
        self,
        snapshot: LedgerSnapshot,
        positions: Mapping[UUID, Decimal],
        adjustments: DerivedAdjustments,
    ) -> Decimal:
        return self.ledger_profit(snapshot, positions) + adjustments.net_profit_effect


def _register_lines(
    current: DerivedAdjustments,
    prior: DerivedAdjustments | None,
) -> list[LineAmount]:
    candidates = (
        (REGISTER_DEPRECIATION, lambda a: -a.depreciation, "IAS 16.73(d)"),
        (REGISTER_DISPOSALS, lambda a: a.disposal_gain - a.disposal_loss, "IAS 16.68"),
    )
    lines = []
    for (code, name), amount_of, ref in candidates:
        cur = amount_of(current)
        pri = amount_of(prior) if prior is not None else None
        if cur == ZERO and not pri:
            continue
        lines.append(LineAmount(code=code, name=name, current=cur, prior=pri, ifrs_reference=ref))
    return lines
