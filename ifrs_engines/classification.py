"""
ifrs_engines.classification -- SectionClassifier.

Responsibility:
    Partition chart-of-accounts rows into statement sections from account
    type, category/subcategory labels and name substrings.  All keyword
    lists live in ClassificationKeywords so the heuristics can be tuned
    from configuration, or replaced by explicit tagging, without touching
    the statement builders.

Architecture position:
    Engines -- pure, zero I/O.

Invariants enforced:
    - Output order mirrors input chart order.
    - Each pass is a filter over the chart; an account appears at most once
      per section.

Known behavior (kept for compatibility):
    Heuristics are not globally exclusive.  "Interest income" is both
    REVENUE and FINANCE_INCOME; an expense named "Finance charges" is both
    OPERATING_EXPENSES and FINANCE_COSTS.  ``overlaps`` reports these so the
    caller can surface a finding instead of silently reassigning accounts.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Self
from uuid import UUID

from ifrs_kernel.domain.ledger import Account, AccountType
from ifrs_kernel.logging_config import get_logger

logger = get_logger("engines.classification")


class SectionKind(str, Enum):
    # Profit or loss
    REVENUE = "revenue"
    COST_OF_SALES = "cost_of_sales"
    OPERATING_EXPENSES = "operating_expenses"
    FINANCE_INCOME = "finance_income"
    FINANCE_COSTS = "finance_costs"
    TAX_EXPENSE = "tax_expense"
    # Financial position
    CURRENT_ASSETS = "current_assets"
    NON_CURRENT_ASSETS = "non_current_assets"
    CURRENT_LIABILITIES = "current_liabilities"
    NON_CURRENT_LIABILITIES = "non_current_liabilities"
    EQUITY = "equity"
    # Cash flow subsets
    CASH = "cash"
    RECEIVABLES = "receivables"
    PAYABLES = "payables"
    PROPERTY_PLANT_EQUIPMENT = "property_plant_equipment"
    INVESTMENTS = "investments"
    DEBT = "debt"
    DEPRECIATION = "depreciation"
    INTEREST_EXPENSE = "interest_expense"
    # Equity components
    SHARE_CAPITAL = "share_capital"
    RETAINED_EARNINGS = "retained_earnings"
    OTHER_COMPREHENSIVE_INCOME = "other_comprehensive_income"
    OTHER_RESERVES = "other_reserves"
    DIVIDENDS = "dividends"


PROFIT_OR_LOSS_SECTIONS: tuple[SectionKind, ...] = (
    SectionKind.REVENUE,
    SectionKind.COST_OF_SALES,
    SectionKind.OPERATING_EXPENSES,
    SectionKind.FINANCE_INCOME,
    SectionKind.FINANCE_COSTS,
    SectionKind.TAX_EXPENSE,
)


@dataclass(frozen=True)
class ClassificationKeywords:
    """
    Labels and name fragments driving the classification heuristics.

    Name and category fragments match case-insensitively as substrings;
    subcategory labels match case-insensitively as whole values.
    """

    cost_of_sales_categories: tuple[str, ...] = ("cost",)
    cost_of_sales_names: tuple[str, ...] = ("cost of",)
    cost_of_sales_subcategories: tuple[str, ...] = ("Cost of Sales",)
    finance_names: tuple[str, ...] = ("interest", "finance")
    finance_income_subcategories: tuple[str, ...] = ("Finance Income",)
    finance_cost_subcategories: tuple[str, ...] = ("Finance Costs",)
    operating_excluded_names: tuple[str, ...] = ("interest", "tax")
    tax_names: tuple[str, ...] = ("tax",)
    tax_subcategories: tuple[str, ...] = ("Income Tax Expense",)
    current_asset_subcategories: tuple[str, ...] = (
        "Cash and Cash Equivalents",
        "Short-term Investments",
        "Trade Receivables",
        "Inventory",
        "Prepaid Expenses",
        "Other Current Assets",
    )
    current_asset_names: tuple[str, ...] = (
        "cash",
        "receivable",
        "inventory",
        "prepaid",
        "current",
    )
    current_liability_subcategories: tuple[str, ...] = (
        "Trade Payables",
        "Short-term Borrowings",
        "Accrued Expenses",
        "Current Tax Payable",
        "Other Current Liabilities",
    )
    current_liability_names: tuple[str, ...] = (
        "payable",
        "accrued",
        "current",
        "short-term",
    )
    cash_subcategories: tuple[str, ...] = ("Cash and Cash Equivalents",)
    cash_names: tuple[str, ...] = ("cash", "bank")
    receivable_subcategories: tuple[str, ...] = ("Trade Receivables",)
    receivable_names: tuple[str, ...] = ("receivable",)
    payable_subcategories: tuple[str, ...] = ("Trade Payables",)
    payable_names: tuple[str, ...] = ("payable",)
    ppe_subcategories: tuple[str, ...] = ("Property, Plant and Equipment",)
    ppe_names: tuple[str, ...] = ("equipment", "property", "plant")
    investment_subcategories: tuple[str, ...] = ("Investments", "Long-term Investments")
    investment_names: tuple[str, ...] = ("investment",)
    debt_subcategories: tuple[str, ...] = ("Long-term Debt", "Short-term Borrowings")
    debt_names: tuple[str, ...] = ("loan", "borrowing", "debt")
    depreciation_names: tuple[str, ...] = ("depreciation", "amortization", "amortisation")
    interest_names: tuple[str, ...] = ("interest",)
    share_capital_subcategories: tuple[str, ...] = ("Share Capital",)
    share_capital_categories: tuple[str, ...] = ("capital",)
    share_capital_names: tuple[str, ...] = ("capital", "share")
    retained_earnings_subcategories: tuple[str, ...] = ("Retained Earnings",)
    retained_earnings_names: tuple[str, ...] = ("retained", "earnings")
    dividend_names: tuple[str, ...] = ("dividend",)
    oci_subcategories: tuple[str, ...] = ("Other Comprehensive Income",)
    oci_names: tuple[str, ...] = ("comprehensive", "revaluation", "translation")
    reserve_subcategories: tuple[str, ...] = ("Other Reserves",)
    reserve_names: tuple[str, ...] = ("reserve",)

    @classmethod
    def from_dict(cls, data: Mapping[str, Iterable[str]]) -> Self:
        """Override individual keyword lists; unknown keys raise ValueError."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown classification keyword lists: {unknown}")
        return cls(**{key: tuple(str(v) for v in values) for key, values in data.items()})

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(values) for key, values in asdict(self).items()}


def _name_has(account: Account, fragments: Iterable[str]) -> bool:
    name = account.name.lower()
    return any(f.lower() in name for f in fragments)


def _category_has(account: Account, fragments: Iterable[str]) -> bool:
    category = account.category.lower()
    return any(f.lower() in category for f in fragments)


def _subcategory_in(account: Account, labels: Iterable[str]) -> bool:
    sub = account.subcategory.strip().lower()
    return bool(sub) and any(sub == label.lower() for label in labels)


class SectionClassifier:
    """
    Keyword-driven account classifier.

    Contract:
        ``classify(accounts, kind)`` returns the accounts belonging to one
        section, in chart order.  ``matches(account, kind)`` is the single
        predicate behind it.
    Non-goals:
        Does not resolve cross-section overlaps; see ``overlaps``.
    """

    def __init__(self, keywords: ClassificationKeywords | None = None):
        self.keywords = keywords or ClassificationKeywords()

    def classify(self, accounts: Sequence[Account], kind: SectionKind) -> tuple[Account, ...]:
        return tuple(a for a in accounts if self.matches(a, kind))

    def matches(self, account: Account, kind: SectionKind) -> bool:
        kw = self.keywords
        t = account.account_type

        if kind is SectionKind.REVENUE:
            return t is AccountType.REVENUE
        if kind is SectionKind.COST_OF_SALES:
            return t is AccountType.EXPENSE and self._is_cost_of_sales(account)
        if kind is SectionKind.OPERATING_EXPENSES:
            return (
                t is AccountType.EXPENSE
                and not self._is_cost_of_sales(account)
                and not _name_has(account, kw.operating_excluded_names)
                and not _subcategory_in(
                    account,
                    kw.cost_of_sales_subcategories
                    + kw.finance_cost_subcategories
                    + kw.tax_subcategories,
                )
            )
        if kind is SectionKind.FINANCE_INCOME:
            return t is AccountType.REVENUE and (
                _name_has(account, kw.finance_names)
                or _subcategory_in(account, kw.finance_income_subcategories)
            )
        if kind is SectionKind.FINANCE_COSTS:
            return t is AccountType.EXPENSE and (
                _name_has(account, kw.finance_names)
                or _subcategory_in(account, kw.finance_cost_subcategories)
            )
        if kind is SectionKind.TAX_EXPENSE:
            return t is AccountType.EXPENSE and (
                _name_has(account, kw.tax_names)
                or _subcategory_in(account, kw.tax_subcategories)
            )

        if kind is SectionKind.CURRENT_ASSETS:
            return t is AccountType.ASSET and self._is_current_asset(account)
        if kind is SectionKind.NON_CURRENT_ASSETS:
            return t is AccountType.ASSET and not self._is_current_asset(account)
        if kind is SectionKind.CURRENT_LIABILITIES:
            return t is AccountType.LIABILITY and self._is_current_liability(account)
        if kind is SectionKind.NON_CURRENT_LIABILITIES:
            return t is AccountType.LIABILITY and not self._is_current_liability(account)
        if kind is SectionKind.EQUITY:
            return t is AccountType.EQUITY

        if kind is SectionKind.CASH:
            return t is AccountType.ASSET and (
                _subcategory_in(account, kw.cash_subcategories)
                or _name_has(account, kw.cash_names)
            )
        if kind is SectionKind.RECEIVABLES:
            return t is AccountType.ASSET and (
                _subcategory_in(account, kw.receivable_subcategories)
                or _name_has(account, kw.receivable_names)
            )
        if kind is SectionKind.PAYABLES:
            return t is AccountType.LIABILITY and (
                _subcategory_in(account, kw.payable_subcategories)
                or _name_has(account, kw.payable_names)
            )
        if kind is SectionKind.PROPERTY_PLANT_EQUIPMENT:
            # Accumulated depreciation moves with the depreciation add-back,
            # not with capital expenditure.
            return (
                t is AccountType.ASSET
                and not _name_has(account, kw.depreciation_names)
                and (
                    _subcategory_in(account, kw.ppe_subcategories)
                    or _name_has(account, kw.ppe_names)
                )
            )
        if kind is SectionKind.INVESTMENTS:
            return t is AccountType.ASSET and (
                _subcategory_in(account, kw.investment_subcategories)
                or _name_has(account, kw.investment_names)
            )
        if kind is SectionKind.DEBT:
            return t is AccountType.LIABILITY and (
                _subcategory_in(account, kw.debt_subcategories)
                or _name_has(account, kw.debt_names)
            )
        if kind is SectionKind.DEPRECIATION:
            return t is AccountType.EXPENSE and _name_has(account, kw.depreciation_names)
        if kind is SectionKind.INTEREST_EXPENSE:
            return t is AccountType.EXPENSE and _name_has(account, kw.interest_names)

        if kind is SectionKind.DIVIDENDS:
            return t is AccountType.EQUITY and _name_has(account, kw.dividend_names)
        if kind in (
            SectionKind.SHARE_CAPITAL,
            SectionKind.OTHER_COMPREHENSIVE_INCOME,
            SectionKind.OTHER_RESERVES,
            SectionKind.RETAINED_EARNINGS,
        ):
            return t is AccountType.EQUITY and self.equity_component(account) is kind

        raise ValueError(f"Unsupported section kind: {kind}")

    def equity_component(self, account: Account) -> SectionKind:
        """
        Assign an equity account to exactly one component.

        Checked in order: share capital, OCI, other reserves; everything
        else (including dividend accounts) is retained earnings.
        """
        kw = self.keywords
        if _name_has(account, kw.dividend_names):
            return SectionKind.RETAINED_EARNINGS
        if _subcategory_in(account, kw.retained_earnings_subcategories) or _name_has(
            account, kw.retained_earnings_names
        ):
            return SectionKind.RETAINED_EARNINGS
        if (
            _subcategory_in(account, kw.share_capital_subcategories)
            or _category_has(account, kw.share_capital_categories)
            or _name_has(account, kw.share_capital_names)
        ):
            return SectionKind.SHARE_CAPITAL
        if _subcategory_in(account, kw.oci_subcategories) or _name_has(account, kw.oci_names):
            return SectionKind.OTHER_COMPREHENSIVE_INCOME
        if _subcategory_in(account, kw.reserve_subcategories) or _name_has(account, kw.reserve_names):
            return SectionKind.OTHER_RESERVES
        return SectionKind.RETAINED_EARNINGS

    def overlaps(
        self,
        accounts: Sequence[Account],
        kinds: Sequence[SectionKind] = PROFIT_OR_LOSS_SECTIONS,
    ) -> dict[UUID, tuple[SectionKind, ...]]:
        """Accounts that match more than one of ``kinds``, with the kinds matched."""
        result: dict[UUID, tuple[SectionKind, ...]] = {}
        for account in accounts:
            matched = tuple(k for k in kinds if self.matches(account, k))
            if len(matched) > 1:
                result[account.account_id] = matched
        if result:
            logger.debug("classification_overlaps_detected", extra={"account_count": len(result)})
        return result

    def _is_cost_of_sales(self, account: Account) -> bool:
        kw = self.keywords
        return (
            _category_has(account, kw.cost_of_sales_categories)
            or _name_has(account, kw.cost_of_sales_names)
            or _subcategory_in(account, kw.cost_of_sales_subcategories)
        )

    def _is_current_asset(self, account: Account) -> bool:
        kw = self.keywords
        return _subcategory_in(account, kw.current_asset_subcategories) or _name_has(
            account, kw.current_asset_names
        )

    def _is_current_liability(self, account: Account) -> bool:
        kw = self.keywords
        return _subcategory_in(account, kw.current_liability_subcategories) or _name_has(
            account, kw.current_liability_names
        )
