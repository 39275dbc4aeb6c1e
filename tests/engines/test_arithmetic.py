"""Decimal ratio helpers that never produce NaN or Infinity, and trace fingerprints."""

from decimal import Decimal

import pytest

from ifrs_engines.arithmetic import (
    margin_percent,
    percent_change,
    quantize,
    safe_divide,
    strict_divide,
)
from ifrs_engines.tracer import compute_input_fingerprint, traced_engine
from ifrs_kernel.exceptions import ComputationError


class TestDivision:
    def test_strict_divide_by_zero_raises(self):
        with pytest.raises(ComputationError) as exc_info:
            strict_divide(Decimal("1"), Decimal("0"), "margin")
        assert exc_info.value.operation == "margin"
        assert exc_info.value.code == "COMPUTATION_ERROR"

    def test_safe_divide_default(self):
        assert safe_divide(Decimal("1"), Decimal("0")) is None
        assert safe_divide(Decimal("1"), Decimal("0"), Decimal("0")) == Decimal("0")
        assert safe_divide(Decimal("1"), Decimal("4")) == Decimal("0.25")


class TestPercentages:
    def test_percent_change(self):
        assert percent_change(Decimal("50"), Decimal("200")) == Decimal("25.00")

    @pytest.mark.parametrize("base", [None, Decimal("0")])
    def test_percent_change_undefined(self, base):
        assert percent_change(Decimal("50"), base) is None

    def test_margin_rounds_half_up(self):
        assert margin_percent(Decimal("80000"), Decimal("120000")) == Decimal("66.67")

    def test_margin_zero_revenue(self):
        assert margin_percent(Decimal("-500"), Decimal("0")) == Decimal("0")

    def test_quantize_precision(self):
        assert quantize(Decimal("1.005"), 2) == Decimal("1.01")
        assert quantize(Decimal("1.5"), 0) == Decimal("2")


class TestFingerprint:
    def test_deterministic(self):
        a = compute_input_fingerprint(("x",), {"x": Decimal("1.0")})
        b = compute_input_fingerprint(("x",), {"x": Decimal("1.0")})
        assert a == b
        assert len(a) == 16

    def test_missing_field_recorded_as_null(self):
        assert compute_input_fingerprint(("x",), {}) == compute_input_fingerprint(
            ("x",), {"x": None}
        )

    def test_distinct_values_differ(self):
        assert compute_input_fingerprint(("x",), {"x": Decimal("1.0")}) != compute_input_fingerprint(
            ("x",), {"x": Decimal("1.00")}
        )

    def test_positional_and_keyword_calls_trace_alike(self, captured_logs):
        @traced_engine("echo_amount", "1.0", fingerprint_fields=("amount",))
        def echo_amount(amount, label="x"):
            return amount

        assert echo_amount(Decimal("5")) == Decimal("5")
        echo_amount(amount=Decimal("5"), label="y")

        traces = [r for r in captured_logs() if r.get("engine_name") == "echo_amount"]
        assert len(traces) == 2
        assert traces[0]["input_fingerprint"] == traces[1]["input_fingerprint"]
        assert traces[0]["function"].endswith("echo_amount")
