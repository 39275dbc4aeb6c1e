"""
ComplianceValidator -- IFRS presentation rules and statement integrity checks.

Responsibility:
    Evaluate a registry of stateless rules against a built statement and
    return findings.  Rules never raise and never modify the statement.

Rules:
    All statements   IAS1_COMPARATIVE (warning, IAS 1.38)            [IFRS]
    Profit or loss   IFRS15_REVENUE (info)                           [IFRS]
                     IAS1_MIN_ITEMS (info, IAS 1.82)                 [IFRS]
    Balance sheet    BALANCE_CHECK (error)
                     IAS1_CURRENT_CLASSIFICATION (warning, IAS 1.60) [IFRS]
    Cash flows       CASH_RECONCILIATION (error)
                     IAS7_OPERATING (warning, IAS 7.13)              [IFRS]
                     IAS7_CLASSIFICATION (info, IAS 7.11)            [IFRS]
    Equity changes   EQUITY_BALANCE_RECONCILIATION (error, IAS 1.106)
                     COMPREHENSIVE_INCOME_CALCULATION (error, IAS 1.7)
                     DIVIDEND_DISCLOSURE (warning, IAS 1.107)        [audit]

    [IFRS] rules run only when the context is IFRS-compliant; integrity
    rules always run.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from typing import Any

from ifrs_kernel.logging_config import get_logger
from ifrs_statements.config import CalculationContext
from ifrs_statements.models import (
    BalanceSheetData,
    CashFlowData,
    EquityChangesData,
    ProfitLossData,
    Severity,
    StatementType,
    StatementValidationResult,
)

logger = get_logger("statements.compliance")

TOLERANCE = Decimal("0.01")

Rule = Callable[[StatementType, Any, CalculationContext], Iterable[StatementValidationResult]]


# =========================================================================
# Common
# =========================================================================


def comparative_period_rule(statement_type, data, context):
    if context.ifrs_compliant and not context.has_prior_period:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="IAS1_COMPARATIVE",
            severity=Severity.WARNING,
            message="IFRS requires comparative information for the preceding period",
            suggestion="Supply a prior period to present comparatives",
            ifrs_reference="IAS 1.38",
        )


# =========================================================================
# Profit or loss
# =========================================================================


def revenue_recorded_rule(statement_type, data: ProfitLossData, context):
    if context.ifrs_compliant and not data.revenue.items and data.revenue.total == 0:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="IFRS15_REVENUE",
            severity=Severity.INFO,
            message="No revenue recorded for the period",
            ifrs_reference="IFRS 15",
        )


def minimum_line_items_rule(statement_type, data: ProfitLossData, context):
    if not context.ifrs_compliant:
        return
    required = (
        ("Revenue", data.revenue),
        ("Finance costs", data.finance_costs),
        ("Income tax expense", data.tax_expense),
    )
    for label, section in required:
        if section.is_empty:
            yield StatementValidationResult(
                statement_type=statement_type,
                rule_name="IAS1_MIN_ITEMS",
                severity=Severity.INFO,
                message=f"Ensure {label} is separately presented if material",
                ifrs_reference="IAS 1.82",
            )


# =========================================================================
# Balance sheet
# =========================================================================


def balance_check_rule(statement_type, data: BalanceSheetData, context):
    if not data.is_balanced:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="BALANCE_CHECK",
            severity=Severity.ERROR,
            message=(
                "Assets do not equal Liabilities plus Equity "
                f"(difference {data.balance_difference})"
            ),
            suggestion="Check for journal lines posted to accounts missing from the chart",
        )


def current_classification_rule(statement_type, data: BalanceSheetData, context):
    if not context.ifrs_compliant:
        return
    if not data.current_assets.items and not data.non_current_assets.items:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="IAS1_CURRENT_CLASSIFICATION",
            severity=Severity.WARNING,
            message="No current/non-current classification detected for assets",
            ifrs_reference="IAS 1.60",
        )
    if not data.current_liabilities.items and not data.non_current_liabilities.items:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="IAS1_CURRENT_CLASSIFICATION",
            severity=Severity.WARNING,
            message="No current/non-current classification detected for liabilities",
            ifrs_reference="IAS 1.69",
        )


# =========================================================================
# Cash flows
# =========================================================================


def cash_reconciliation_rule(statement_type, data: CashFlowData, context):
    rec = data.reconciliation
    if not rec.is_reconciled:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="CASH_RECONCILIATION",
            severity=Severity.ERROR,
            message=(
                "Net cash flow does not match change in cash and cash equivalents "
                f"(net cash flow {rec.net_cash_flow}, change in cash "
                f"{rec.balance_sheet_movement}, difference {rec.difference})"
            ),
            suggestion="Review account classifications for cash flow categories",
            ifrs_reference="IAS 7.45",
        )


def operating_activities_rule(statement_type, data: CashFlowData, context):
    if context.ifrs_compliant and not data.operating_activities.items:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="IAS7_OPERATING",
            severity=Severity.WARNING,
            message="No operating cash flows detected",
            ifrs_reference="IAS 7.13",
        )


def classification_consistency_rule(statement_type, data: CashFlowData, context):
    if context.ifrs_compliant:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="IAS7_CLASSIFICATION",
            severity=Severity.INFO,
            message="Ensure cash flows are classified consistently between periods",
            ifrs_reference="IAS 7.11",
        )


# =========================================================================
# Changes in equity
# =========================================================================


def equity_roll_forward_rule(statement_type, data: EquityChangesData, context):
    for component in data.components:
        if abs(component.unexplained_difference) >= TOLERANCE:
            yield StatementValidationResult(
                statement_type=statement_type,
                rule_name="EQUITY_BALANCE_RECONCILIATION",
                severity=Severity.ERROR,
                message=(
                    f"{component.name}: opening plus movements does not equal closing "
                    f"(difference {component.unexplained_difference})"
                ),
                suggestion="Check equity account classification",
                ifrs_reference="IAS 1.106",
            )


def comprehensive_income_rule(statement_type, data: EquityChangesData, context):
    expected = data.profit_for_period + data.other_comprehensive_income
    if abs(data.total_comprehensive_income - expected) >= TOLERANCE:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="COMPREHENSIVE_INCOME_CALCULATION",
            severity=Severity.ERROR,
            message=(
                "Total comprehensive income does not equal profit plus other "
                "comprehensive income"
            ),
            ifrs_reference="IAS 1.7",
        )


def dividend_disclosure_rule(statement_type, data: EquityChangesData, context):
    if context.audit_required and data.dividends != 0:
        yield StatementValidationResult(
            statement_type=statement_type,
            rule_name="DIVIDEND_DISCLOSURE",
            severity=Severity.WARNING,
            message="Dividend information should be disclosed when dividends are paid",
            suggestion="Include dividend per share and related disclosures",
            ifrs_reference="IAS 1.107",
        )


DEFAULT_RULES: Mapping[StatementType, tuple[Rule, ...]] = {
    StatementType.PROFIT_LOSS: (
        revenue_recorded_rule,
        comparative_period_rule,
        minimum_line_items_rule,
    ),
    StatementType.BALANCE_SHEET: (
        balance_check_rule,
        current_classification_rule,
        comparative_period_rule,
    ),
    StatementType.CASH_FLOW: (
        cash_reconciliation_rule,
        operating_activities_rule,
        classification_consistency_rule,
        comparative_period_rule,
    ),
    StatementType.EQUITY_CHANGES: (
        equity_roll_forward_rule,
        comprehensive_income_rule,
        dividend_disclosure_rule,
        comparative_period_rule,
    ),
}


class ComplianceValidator:
    """
    Applies the rule registry for a statement type.

    Contract:
        ``validate`` is stateless: the same statement and context always
        yield the same findings, in registry order.
    """

    def __init__(self, rules: Mapping[StatementType, tuple[Rule, ...]] | None = None):
        self._rules = dict(rules if rules is not None else DEFAULT_RULES)

    def rules_for(self, statement_type: StatementType) -> tuple[Rule, ...]:
        return self._rules.get(statement_type, ())

    def validate(
        self,
        statement_type: StatementType,
        data: Any,
        context: CalculationContext,
    ) -> tuple[StatementValidationResult, ...]:
        findings: list[StatementValidationResult] = []
        for rule in self.rules_for(statement_type):
            findings.extend(rule(statement_type, data, context))

        logger.info(
            "statement_validated",
            extra={
                "statement_type": statement_type.value,
                "finding_count": len(findings),
                "error_count": sum(1 for f in findings if f.severity is Severity.ERROR),
            },
        )
        return tuple(findings)
