"""JSON log records and LogContext propagation (ifrs_kernel/logging_config.py)."""

import asyncio
import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from ifrs_kernel.exceptions import (
    ChartOfAccountsUnavailableError,
    ConfigurationError,
    FixedAssetRegisterUnavailableError,
    InvalidPeriodError,
    LedgerUnavailableError,
    StructuralError,
)
from ifrs_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _isolated_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


class JsonCapture:
    def __init__(self):
        self.stream = StringIO()
        self.handler = logging.StreamHandler(self.stream)
        self.handler.setFormatter(StructuredFormatter())

    def records(self) -> list[dict]:
        return [json.loads(line) for line in self.stream.getvalue().splitlines() if line]

    def only(self) -> dict:
        (record,) = self.records()
        return record


@pytest.fixture
def capture() -> JsonCapture:
    sink = JsonCapture()
    configure_logging(handler=sink.handler)
    return sink


@pytest.fixture
def log():
    return get_logger("statements.service")


class TestRecordShape:
    def test_core_keys(self, capture, log):
        log.info("balance_sheet_generated")

        record = capture.only()
        assert record["level"] == "INFO"
        assert record["message"] == "balance_sheet_generated"
        assert record["logger"] == "ifrs_reporting.statements.service"
        assert record["ts"].endswith("+00:00")

    def test_extra_fields_flattened(self, capture, log):
        log.info("section_built", extra={"section": "revenue", "item_count": 3})

        record = capture.only()
        assert record["section"] == "revenue"
        assert record["item_count"] == 3

    def test_money_ids_and_dates_as_strings(self, capture, log):
        account_id = uuid4()
        log.info(
            "reconciliation_difference",
            extra={
                "account_id": account_id,
                "difference": Decimal("-0.50"),
                "period_end": date(2024, 12, 31),
            },
        )

        record = capture.only()
        assert record["account_id"] == str(account_id)
        assert record["difference"] == "-0.50"
        assert record["period_end"] == "2024-12-31"

    def test_below_level_dropped(self, capture, log):
        log.debug("IFRS_ENGINE_TRACE")
        log.warning("unknown_account_postings", extra={"count": 2})

        assert [r["message"] for r in capture.records()] == ["unknown_account_postings"]


class TestExceptionFields:
    def test_plain_exception(self, capture, log):
        try:
            raise ValueError("bad threshold")
        except ValueError:
            log.exception("config_rejected")

        record = capture.only()
        assert record["level"] == "ERROR"
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "bad threshold"
        assert "exc_code" not in record
        assert "Traceback" in record["traceback"]

    @pytest.mark.parametrize(
        "error, code, collaborator",
        [
            (ChartOfAccountsUnavailableError("timeout"), "CHART_OF_ACCOUNTS_UNAVAILABLE", "ChartOfAccountsProvider"),
            (LedgerUnavailableError("timeout"), "LEDGER_UNAVAILABLE", "LedgerAccessor"),
            (FixedAssetRegisterUnavailableError("timeout"), "FIXED_ASSET_REGISTER_UNAVAILABLE", "FixedAssetAdjustmentProvider"),
        ],
    )
    def test_structural_error_attributes(self, capture, log, error, code, collaborator):
        try:
            raise error
        except StructuralError:
            log.error("generation_aborted", exc_info=True)

        record = capture.only()
        assert record["exc_code"] == code
        assert record["exc_collaborator"] == collaborator
        assert record["exc_reason"] == "timeout"

    def test_period_error_dates_serialized(self, capture, log):
        try:
            raise InvalidPeriodError(date(2024, 12, 31), date(2024, 1, 1))
        except InvalidPeriodError:
            log.error("period_rejected", exc_info=True)

        record = capture.only()
        assert record["exc_code"] == "INVALID_PERIOD"
        assert record["exc_start_date"] == "2024-12-31"
        assert record["exc_end_date"] == "2024-01-01"

    def test_configuration_error_source(self, capture, log):
        try:
            raise ConfigurationError("reporting.yaml", "materiality_threshold is negative")
        except ConfigurationError:
            log.error("config_rejected", exc_info=True)

        record = capture.only()
        assert record["exc_source"] == "reporting.yaml"
        assert record["exc_reason"] == "materiality_threshold is negative"


class TestLogContext:
    def test_fields_appear_on_records(self, capture, log):
        LogContext.set(correlation_id="run-7", company_id="ACME", statement_type="cash_flow")
        log.info("cash_flow_generated")

        record = capture.only()
        assert record["correlation_id"] == "run-7"
        assert record["company_id"] == "ACME"
        assert record["statement_type"] == "cash_flow"

    def test_absent_fields_omitted(self, capture, log):
        log.info("no_context")

        record = capture.only()
        assert not {"correlation_id", "company_id", "statement_type", "period_end"} & record.keys()

    def test_set_merges_and_skips_none(self):
        LogContext.set(correlation_id="a")
        LogContext.set(company_id="ACME", period_end=None)
        assert LogContext.get_all() == {"correlation_id": "a", "company_id": "ACME"}

    def test_unknown_field_rejected(self):
        with pytest.raises(KeyError):
            LogContext.set(event_id="nope")
        with pytest.raises(KeyError):
            with LogContext.bind(batch_id="nope"):
                pass

    def test_clear(self):
        LogContext.set(correlation_id="a", period_end="2024-12-31")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_overlays_and_restores(self):
        LogContext.set(correlation_id="outer")
        with LogContext.bind(correlation_id="inner", period_end="2024-12-31"):
            assert LogContext.get_all() == {"correlation_id": "inner", "period_end": "2024-12-31"}
        assert LogContext.get_all() == {"correlation_id": "outer"}

    def test_bind_restores_after_exception(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(statement_type="balance_sheet"):
                raise RuntimeError
        assert LogContext.get_all() == {}

    def test_get_all_returns_copy(self):
        LogContext.set(correlation_id="a")
        LogContext.get_all()["correlation_id"] = "tampered"
        assert LogContext.get_all()["correlation_id"] == "a"

    def test_concurrent_tasks_keep_their_own_fields(self, capture, log):
        async def generate(statement_type: str):
            with LogContext.bind(statement_type=statement_type):
                await asyncio.sleep(0)
                log.info("statement_generated")
                return LogContext.get_all()["statement_type"]

        async def run():
            with LogContext.bind(correlation_id="batch-1"):
                return await asyncio.gather(
                    generate("profit_loss"), generate("balance_sheet"), generate("cash_flow")
                )

        assert asyncio.run(run()) == ["profit_loss", "balance_sheet", "cash_flow"]
        records = capture.records()
        assert sorted(r["statement_type"] for r in records) == [
            "balance_sheet",
            "cash_flow",
            "profit_loss",
        ]
        assert {r["correlation_id"] for r in records} == {"batch-1"}
        assert LogContext.get_all() == {}


class TestConfigureLogging:
    def test_second_call_ignored(self):
        first, second = JsonCapture(), JsonCapture()
        configure_logging(handler=first.handler)
        configure_logging(handler=second.handler, level=logging.DEBUG)

        root = logging.getLogger("ifrs_reporting")
        assert root.handlers == [first.handler]
        assert root.level == logging.INFO
        assert root.propagate is False

    def test_reset_allows_reconfiguration(self):
        configure_logging(handler=JsonCapture().handler)
        reset_logging()
        assert logging.getLogger("ifrs_reporting").handlers == []

        sink = JsonCapture()
        configure_logging(handler=sink.handler, level=logging.DEBUG)
        get_logger("engines.aggregation").debug("balances_aggregated")
        assert sink.only()["logger"] == "ifrs_reporting.engines.aggregation"

    def test_stream_argument(self):
        stream = StringIO()
        configure_logging(stream=stream)
        get_logger("statements").warning("zero_revenue")
        assert json.loads(stream.getvalue())["message"] == "zero_revenue"
