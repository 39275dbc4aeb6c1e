"""Tests for render_to_dict."""

import json
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from ifrs_kernel.domain.ledger import StatementPeriod
from ifrs_statements.models import Severity, StatementType, StatementValidationResult
from ifrs_statements.profit_loss import ProfitLossBuilder
from ifrs_statements.rendering import render_to_dict


@dataclass(frozen=True)
class _Sample:
    amount: Decimal
    when: date
    ids: tuple[UUID, ...]
    labels: dict


class TestRenderToDict:
    def test_primitives(self):
        assert render_to_dict(None) is None
        assert render_to_dict(Decimal("1234.50")) == "1234.50"
        assert render_to_dict(date(2024, 12, 31)) == "2024-12-31"
        assert render_to_dict(datetime(2024, 12, 31, 8, 0)) == "2024-12-31T08:00:00"
        assert render_to_dict(Severity.WARNING) == "warning"
        assert render_to_dict(True) is True
        assert render_to_dict(3) == 3

    def test_nested_dataclass(self):
        uid = UUID("00000000-0000-0000-0000-000000000001")
        sample = _Sample(Decimal("0.10"), date(2024, 1, 1), (uid,), {1: Decimal("2")})

        assert render_to_dict(sample) == {
            "amount": "0.10",
            "when": "2024-01-01",
            "ids": [str(uid)],
            "labels": {"1": "2"},
        }

    def test_validation_finding(self):
        finding = StatementValidationResult(
            statement_type=StatementType.CASH_FLOW,
            rule_name="CASH_RECONCILIATION",
            severity=Severity.ERROR,
            message="Net cash flow does not match",
        )
        rendered = render_to_dict(finding)
        assert rendered["statement_type"] == "cash_flow"
        assert rendered["severity"] == "error"
        assert rendered["suggestion"] is None

    def test_statement_serializes_to_json(self, snapshot, make_context, period_2024, period_2023):
        data = ProfitLossBuilder().build(snapshot, make_context(period_2024, period_2023))
        rendered = render_to_dict(data)

        revenue = rendered["revenue"]
        assert revenue["total"] == "120000"
        assert revenue["items"][0]["name"] == "Sales revenue"
        assert revenue["items"][0]["variance_percent"] == "300.00"
        assert isinstance(rendered["adjustments"], dict)
        assert json.loads(json.dumps(rendered)) == rendered

    def test_period_is_rendered_by_fields(self):
        period = StatementPeriod(date(2024, 1, 1), date(2024, 12, 31))
        assert render_to_dict(period) == {"start_date": "2024-01-01", "end_date": "2024-12-31"}
