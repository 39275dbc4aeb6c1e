"""
Section assembly shared by every statement builder.

Responsibility:
    Turn candidate line amounts into FinancialStatementItems and
    FinancialStatementSections with comparatives, variances, the
    materiality split and formatted strings.

Invariants enforced:
    - ``total`` sums every candidate, displayed or not; items whose
      absolute current amount is below the materiality threshold are
      dropped from ``items`` and carried in ``immaterial_total``.
    - ``prior_total`` exists only when the context has a prior period.
    - ``variance`` exists only when a prior amount exists;
      ``variance_percent`` only when that prior amount is non-zero.
    - Derived items are appended only when strictly positive and update the
      section total and variance.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from ifrs_engines.arithmetic import percent_change
from ifrs_kernel.domain.ledger import Account
from ifrs_statements.config import CalculationContext
from ifrs_statements.formatting import CurrencyFormatter
from ifrs_statements.models import FinancialStatementItem, FinancialStatementSection

ZERO = Decimal("0")


@dataclass(frozen=True)
class LineAmount:
    """A candidate line before materiality and formatting are applied."""

    code: str
    name: str
    current: Decimal
    prior: Decimal | None = None
    ifrs_reference: str | None = None
    account_id: UUID | None = None
    level: int = 1


def account_lines(
    accounts: Iterable[Account],
    current: Mapping[UUID, Decimal],
    prior: Mapping[UUID, Decimal] | None,
    sign: int = 1,
) -> list[LineAmount]:
    """One LineAmount per account, in chart order."""
    lines = []
    for account in accounts:
        lines.append(
            LineAmount(
                code=account.code,
                name=account.name,
                current=sign * current.get(account.account_id, ZERO),
                prior=(sign * prior.get(account.account_id, ZERO)) if prior is not None else None,
                ifrs_reference=account.ifrs_reference,
                account_id=account.account_id,
            )
        )
    return lines


class SectionBuilder:
    """Formats amounts for one calculation context."""

    def __init__(self, context: CalculationContext, formatter: CurrencyFormatter):
        self.context = context
        self.formatter = formatter

    def fmt(self, amount: Decimal | None) -> str | None:
        if amount is None:
            return None
        return self.formatter.format(amount, self.context.functional_currency)

    def is_material(self, amount: Decimal) -> bool:
        return abs(amount) >= self.context.materiality_threshold

    def item(self, line: LineAmount, is_derived: bool = False) -> FinancialStatementItem:
        prior = line.prior if self.context.has_prior_period else None
        variance = (line.current - prior) if prior is not None else None
        return FinancialStatementItem(
            code=line.code,
            name=line.name,
            current_period=line.current,
            formatted_current=self.fmt(line.current),
            prior_period=prior,
            formatted_prior=self.fmt(prior),
            variance=variance,
            variance_percent=percent_change(variance, prior, self.context.rounding_precision)
            if variance is not None
            else None,
            formatted_variance=self.fmt(variance),
            level=line.level,
            ifrs_reference=line.ifrs_reference,
            is_material=self.is_material(line.current),
            account_id=line.account_id,
            is_derived=is_derived,
        )

    def section(
        self,
        code: str,
        name: str,
        lines: Sequence[LineAmount],
        ifrs_reference: str | None = None,
    ) -> FinancialStatementSection:
        displayed: list[FinancialStatementItem] = []
        total = ZERO
        immaterial_total = ZERO
        immaterial_count = 0
        prior_total = ZERO if self.context.has_prior_period else None

        for line in lines:
            total += line.current
            if prior_total is not None:
                prior_total += line.prior or ZERO
            if self.is_material(line.current):
                displayed.append(self.item(line))
            else:
                immaterial_total += line.current
                immaterial_count += 1

        return self._assemble(
            code=code,
            name=name,
            items=tuple(displayed),
            total=total,
            prior_total=prior_total,
            immaterial_total=immaterial_total,
            immaterial_count=immaterial_count,
            ifrs_reference=ifrs_reference,
        )

    def with_derived_item(
        self,
        section: FinancialStatementSection,
        line: LineAmount,
    ) -> FinancialStatementSection:
        """Append a derived adjustment line when its amount is strictly positive."""
        if line.current <= ZERO:
            return section
        prior_total = section.prior_total
        if prior_total is not None:
            prior_total += line.prior or ZERO
        return self._assemble(
            code=section.code,
            name=section.name,
            items=section.items + (self.item(line, is_derived=True),),
            total=section.total + line.current,
            prior_total=prior_total,
            immaterial_total=section.immaterial_total,
            immaterial_count=section.immaterial_count,
            ifrs_reference=section.ifrs_reference,
        )

    def _assemble(
        self,
        *,
        code: str,
        name: str,
        items: tuple[FinancialStatementItem, ...],
        total: Decimal,
        prior_total: Decimal | None,
        immaterial_total: Decimal,
        immaterial_count: int,
        ifrs_reference: str | None,
    ) -> FinancialStatementSection:
        variance = (total - prior_total) if prior_total is not None else None
        return FinancialStatementSection(
            code=code,
            name=name,
            items=items,
            total=total,
            formatted_total=self.fmt(total),
            prior_total=prior_total,
            formatted_prior_total=self.fmt(prior_total),
            variance=variance,
            variance_percent=percent_change(variance, prior_total, self.context.rounding_precision)
            if variance is not None
            else None,
            immaterial_total=immaterial_total,
            immaterial_count=immaterial_count,
            ifrs_reference=ifrs_reference,
        )
