"""Tests for the keyword-driven SectionClassifier."""

from uuid import uuid4

import pytest

from ifrs_engines.classification import (
    PROFIT_OR_LOSS_SECTIONS,
    ClassificationKeywords,
    SectionClassifier,
    SectionKind,
)
from ifrs_kernel.domain.ledger import Account, AccountType


def _account(name, account_type, category="", subcategory=""):
    return Account(uuid4(), "X", name, account_type, category, subcategory)


@pytest.fixture
def classifier():
    return SectionClassifier()


class TestProfitOrLoss:
    def test_cost_of_sales_by_category(self, classifier):
        account = _account("Materials", AccountType.EXPENSE, category="Direct Costs")
        assert classifier.matches(account, SectionKind.COST_OF_SALES)
        assert not classifier.matches(account, SectionKind.OPERATING_EXPENSES)

    def test_operating_expense_excludes_interest_and_tax(self, classifier):
        interest = _account("Interest on overdraft", AccountType.EXPENSE)
        tax = _account("Corporation tax", AccountType.EXPENSE)
        salaries = _account("Salaries", AccountType.EXPENSE, category="Operating")
        opex = classifier.classify([interest, tax, salaries], SectionKind.OPERATING_EXPENSES)
        assert opex == (salaries,)

    def test_finance_cost_by_subcategory(self, classifier):
        account = _account("Bank charges", AccountType.EXPENSE, subcategory="Finance Costs")
        assert classifier.matches(account, SectionKind.FINANCE_COSTS)
        assert not classifier.matches(account, SectionKind.OPERATING_EXPENSES)

    def test_subcategory_match_is_case_insensitive(self, classifier):
        account = _account("Stock", AccountType.ASSET, subcategory="inventory")
        assert classifier.matches(account, SectionKind.CURRENT_ASSETS)

    def test_chart_order_preserved(self, classifier, chart):
        expenses = classifier.classify(chart.accounts, SectionKind.OPERATING_EXPENSES)
        assert [a.code for a in expenses] == ["6000", "6100"]


class TestFinancialPosition:
    def test_current_vs_non_current(self, classifier, chart):
        current = classifier.classify(chart.accounts, SectionKind.CURRENT_ASSETS)
        non_current = classifier.classify(chart.accounts, SectionKind.NON_CURRENT_ASSETS)
        assert current == (chart.cash, chart.receivables)
        assert non_current == (chart.plant, chart.accumulated_depreciation)

    def test_liabilities(self, classifier, chart):
        assert classifier.classify(chart.accounts, SectionKind.CURRENT_LIABILITIES) == (chart.payables,)
        assert classifier.classify(chart.accounts, SectionKind.NON_CURRENT_LIABILITIES) == (chart.loan,)

    def test_ppe_excludes_accumulated_depreciation(self, classifier, chart):
        assert classifier.classify(chart.accounts, SectionKind.PROPERTY_PLANT_EQUIPMENT) == (chart.plant,)


class TestEquityComponents:
    @pytest.mark.parametrize(
        "name,subcategory,expected",
        [
            ("Ordinary shares", "", SectionKind.SHARE_CAPITAL),
            ("Share premium", "Share Capital", SectionKind.SHARE_CAPITAL),
            ("Retained earnings", "", SectionKind.RETAINED_EARNINGS),
            ("Dividends paid", "", SectionKind.RETAINED_EARNINGS),
            ("Revaluation surplus", "", SectionKind.OTHER_COMPREHENSIVE_INCOME),
            ("Hedging reserve", "", SectionKind.OTHER_RESERVES),
            ("Owner drawings", "", SectionKind.RETAINED_EARNINGS),
        ],
    )
    def test_component_precedence(self, classifier, name, subcategory, expected):
        account = _account(name, AccountType.EQUITY, subcategory=subcategory)
        assert classifier.equity_component(account) is expected

    def test_dividend_account_is_both_dividends_and_retained_earnings(self, classifier):
        account = _account("Dividends declared", AccountType.EQUITY)
        assert classifier.matches(account, SectionKind.DIVIDENDS)
        assert classifier.matches(account, SectionKind.RETAINED_EARNINGS)


class TestOverlaps:
    def test_standard_chart_has_no_overlaps(self, classifier, chart):
        assert classifier.overlaps(chart.accounts) == {}

    def test_interest_income_overlaps_revenue_and_finance_income(self, classifier):
        account = _account("Interest income", AccountType.REVENUE)
        overlaps = classifier.overlaps([account])
        assert overlaps == {
            account.account_id: (SectionKind.REVENUE, SectionKind.FINANCE_INCOME)
        }

    def test_finance_charges_overlap_opex_and_finance_costs(self, classifier):
        account = _account("Finance charges", AccountType.EXPENSE)
        kinds = classifier.overlaps([account], PROFIT_OR_LOSS_SECTIONS)[account.account_id]
        assert SectionKind.OPERATING_EXPENSES in kinds
        assert SectionKind.FINANCE_COSTS in kinds


class TestKeywords:
    def test_custom_keywords(self):
        keywords = ClassificationKeywords.from_dict({"cash_names": ["till"]})
        classifier = SectionClassifier(keywords)
        till = _account("Shop till", AccountType.ASSET)
        bank = _account("Bank current account", AccountType.ASSET)
        assert classifier.classify([till, bank], SectionKind.CASH) == (till,)

    def test_unknown_keyword_list_rejected(self):
        with pytest.raises(ValueError):
            ClassificationKeywords.from_dict({"nonsense": ["x"]})

    def test_round_trip_through_dict(self):
        keywords = ClassificationKeywords()
        assert ClassificationKeywords.from_dict(keywords.to_dict()) == keywords
