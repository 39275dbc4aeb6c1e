"""
Tests for ReportingService: orchestration, metadata, failure handling,
concurrency and cross-statement checks.
"""

import asyncio
import json
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from ifrs_kernel.domain.ledger import AccountType, FixedAsset, JournalEntry, JournalLine
from ifrs_kernel.exceptions import (
    ChartOfAccountsUnavailableError,
    FixedAssetRegisterUnavailableError,
    LedgerUnavailableError,
    StructuralError,
)
from ifrs_statements.config import CompanySettings, IFRSSettings, ReportingConfig
from ifrs_statements.models import CashFlowMethod, Severity, StatementType
from ifrs_statements.providers import InMemoryLedger

UNKNOWN_ACCOUNT_WARNING = (
    "1 account(s) referenced by journal lines are missing from the chart "
    "of accounts and were ignored"
)


class FailingChart:
    async def get_all_accounts(self):
        raise ConnectionError("database unreachable")


class EmptyResponseChart:
    async def get_all_accounts(self):
        return None


class FailingLedger:
    def __init__(self, exc: Exception):
        self.exc = exc

    async def get_entries_for_period(self, start, end):
        raise self.exc


class FailingRegister:
    async def get_fixed_assets(self):
        raise TimeoutError("register timed out")


class RecordingLedger(InMemoryLedger):
    def __init__(self, entries):
        super().__init__(entries)
        self.calls: list[tuple[date, date]] = []

    async def get_entries_for_period(self, start, end):
        self.calls.append((start, end))
        return await super().get_entries_for_period(start, end)


def _stray_entry(cash_account) -> JournalEntry:
    return JournalEntry(
        entry_date=date(2024, 8, 1),
        company_id=uuid4(),
        lines=(
            JournalLine(cash_account.account_id, debit=Decimal("200")),
            JournalLine(uuid4(), credit=Decimal("200")),
        ),
    )


class TestGenerateStatements:
    def test_profit_loss(self, service, period_2024, deterministic_clock):
        result = asyncio.run(service.generate_profit_loss(period_2024))

        assert result.data.profit_for_period.current_period == Decimal("57000")
        assert result.metadata.statement_title == "Statement of Profit or Loss"
        assert result.metadata.statement_type is StatementType.PROFIT_LOSS
        assert result.metadata.period == period_2024
        assert result.metadata.prior_period is None
        assert result.metadata.currency == "USD"
        assert result.metadata.accounting_standard == "IFRS"
        assert result.metadata.audit_status == "Not required"
        assert result.metadata.preparation_date == deterministic_clock.now()
        assert result.calculation_time_ms >= 0
        assert result.warnings == ()

    def test_balance_sheet(self, service, period_2024, period_2023):
        result = asyncio.run(service.generate_balance_sheet(period_2024, period_2023))

        assert result.metadata.statement_title == "Statement of Financial Position"
        assert result.data.is_balanced
        assert result.data.total_assets == Decimal("174000")
        assert result.data.prior_total_assets == Decimal("70000")
        assert not result.has_errors

    @pytest.mark.parametrize(
        "method,title",
        [
            (CashFlowMethod.INDIRECT, "Statement of Cash Flows (Indirect Method)"),
            (CashFlowMethod.DIRECT, "Statement of Cash Flows (Direct Method)"),
        ],
    )
    def test_cash_flow(self, service, period_2024, method, title):
        result = asyncio.run(service.generate_cash_flow(period_2024, method=method))

        assert result.metadata.statement_title == title
        assert result.data.method is method
        assert result.data.operating_cash_flow == Decimal("46000")
        assert result.data.is_reconciled

    def test_equity_changes(self, service, period_2024):
        result = asyncio.run(service.generate_equity_changes(period_2024))

        assert result.metadata.statement_title == "Statement of Changes in Equity"
        assert result.data.closing_total == Decimal("124000")
        assert not result.has_errors

    def test_company_and_audit_metadata(self, make_service, period_2024):
        config = ReportingConfig(
            ifrs=IFRSSettings(functional_currency="EUR", external_audit_required=True),
            company=CompanySettings(company_name="Acme Holdings"),
        )
        result = asyncio.run(make_service(config=config).generate_profit_loss(period_2024))

        assert result.metadata.company_name == "Acme Holdings"
        assert result.metadata.currency == "EUR"
        assert result.metadata.audit_status == "Unaudited"

    def test_missing_comparatives_warn_but_do_not_fail(self, service, period_2024):
        result = asyncio.run(service.generate_profit_loss(period_2024))

        assert [f.rule_name for f in result.validation] == ["IAS1_COMPARATIVE"]
        assert result.is_presentation_ready

    def test_fixed_asset_register_feeds_statements(self, make_service, period_2024):
        van = FixedAsset(uuid4(), "Van", date(2024, 1, 1), Decimal("12000"), 5)
        service = make_service(fixed_assets=(van,))

        profit_loss = asyncio.run(service.generate_profit_loss(period_2024))
        balance_sheet = asyncio.run(service.generate_balance_sheet(period_2024))

        assert profit_loss.data.profit_for_period.current_period == Decimal("54600")
        assert balance_sheet.data.is_balanced


class TestCollaboratorFailures:
    def test_chart_failure(self, make_service, period_2024):
        service = make_service()
        service._chart = FailingChart()

        with pytest.raises(ChartOfAccountsUnavailableError) as exc_info:
            asyncio.run(service.generate_profit_loss(period_2024))

        assert exc_info.value.code == "CHART_OF_ACCOUNTS_UNAVAILABLE"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert "database unreachable" in str(exc_info.value)

    def test_chart_returns_nothing(self, make_service, period_2024):
        service = make_service()
        service._chart = EmptyResponseChart()

        with pytest.raises(ChartOfAccountsUnavailableError):
            asyncio.run(service.generate_balance_sheet(period_2024))

    def test_ledger_failure(self, make_service, period_2024):
        service = make_service()
        service._ledger = FailingLedger(OSError("disk error"))

        with pytest.raises(LedgerUnavailableError) as exc_info:
            asyncio.run(service.generate_cash_flow(period_2024))

        assert exc_info.value.collaborator == "LedgerAccessor"
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_structural_error_passes_through(self, make_service, period_2024):
        original = LedgerUnavailableError("replica lag")
        service = make_service()
        service._ledger = FailingLedger(original)

        with pytest.raises(LedgerUnavailableError) as exc_info:
            asyncio.run(service.generate_equity_changes(period_2024))

        assert exc_info.value is original

    def test_register_failure(self, make_service, period_2024):
        service = make_service()
        service._fixed_assets = FailingRegister()

        with pytest.raises(FixedAssetRegisterUnavailableError) as exc_info:
            asyncio.run(service.generate_all(period_2024))

        assert isinstance(exc_info.value, StructuralError)


class TestCallIsolation:
    def test_same_inputs_same_output(self, service, period_2024, period_2023):
        first = asyncio.run(service.generate_profit_loss(period_2024, period_2023))
        second = asyncio.run(service.generate_profit_loss(period_2024, period_2023))

        assert first.data == second.data
        assert first.validation == second.validation
        assert first.metadata == second.metadata

    def test_concurrent_calls_for_different_periods(self, service, period_2024, period_2023):
        async def both():
            return await asyncio.gather(
                service.generate_profit_loss(period_2024),
                service.generate_profit_loss(period_2023),
            )

        current, prior = asyncio.run(both())
        assert current.data.profit_for_period.current_period == Decimal("57000")
        assert prior.data.profit_for_period.current_period == Decimal("20000")

    def test_ledger_requeried_from_inception(
        self, make_service, entries, period_2024, period_2023
    ):
        service = make_service()
        ledger = RecordingLedger(entries)
        service._ledger = ledger

        asyncio.run(service.generate_balance_sheet(period_2024, period_2023))
        asyncio.run(service.generate_balance_sheet(period_2024))

        assert ledger.calls == [
            (date(1900, 1, 1), date(2024, 12, 31)),
            (date(1900, 1, 1), date(2024, 12, 31)),
        ]

    def test_empty_chart_degrades_gracefully(self, make_service, period_2024):
        service = make_service(accounts=(), ledger_entries=())
        result = asyncio.run(service.generate_profit_loss(period_2024))

        assert result.data.revenue.total == Decimal("0")
        assert result.data.profit_for_period.margin == Decimal("0")


class TestGenerateAll:
    def test_consistent_package(self, service, period_2024, period_2023):
        package = asyncio.run(service.generate_all(period_2024, period_2023))

        assert package.cross_statement_validation == ()
        assert not package.has_errors
        assert package.balance_sheet.data.total_equity == package.equity_changes.data.closing_total
        assert (
            package.profit_loss.data.profit_for_period.current_period
            == package.equity_changes.data.profit_for_period
        )
        assert package.cash_flow.data.closing_cash == package.balance_sheet.data.cash_and_equivalents

    def test_direct_method_package(self, service, period_2024):
        package = asyncio.run(service.generate_all(period_2024, method=CashFlowMethod.DIRECT))
        assert package.cash_flow.data.method is CashFlowMethod.DIRECT
        assert package.cash_flow.data.is_reconciled

    def test_classification_overlap_flagged(
        self, make_service, chart, entries, new_account, journal, period_2024
    ):
        interest_income = new_account("4100", "Interest income", AccountType.REVENUE)
        earned = journal(
            date(2024, 10, 31), (chart.cash, "500", "0"), (interest_income, "0", "500")
        )
        service = make_service(
            accounts=chart.accounts + (interest_income,),
            ledger_entries=entries + (earned,),
        )
        package = asyncio.run(service.generate_all(period_2024))

        overlaps = [
            f for f in package.cross_statement_validation if f.rule_name == "CLASSIFICATION_OVERLAP"
        ]
        assert len(overlaps) == 1
        assert overlaps[0].severity is Severity.WARNING
        assert "Interest income" in overlaps[0].message
        # Counted in both revenue and finance income, so profit or loss
        # overstates the ledger profit carried into equity.
        assert package.profit_loss.data.profit_for_period.current_period == Decimal("58000")
        assert package.equity_changes.data.profit_for_period == Decimal("57500")
        mismatch = [
            f
            for f in package.cross_statement_validation
            if f.rule_name == "PROFIT_EQUITY_RECONCILIATION"
        ]
        assert len(mismatch) == 1
        assert "500" in mismatch[0].message

    def test_stray_postings_surface_as_warnings(self, make_service, chart, entries, period_2024):
        service = make_service(ledger_entries=entries + (_stray_entry(chart.cash),))
        package = asyncio.run(service.generate_all(period_2024))

        assert package.profit_loss.warnings == (UNKNOWN_ACCOUNT_WARNING,)
        assert package.balance_sheet.has_errors
        assert UNKNOWN_ACCOUNT_WARNING in package.balance_sheet.warnings
        assert package.balance_sheet.warnings[0].startswith("Assets do not equal")
        assert [f.rule_name for f in package.cash_flow.errors] == ["CASH_RECONCILIATION"]
        assert package.has_errors


class TestLoggingAndRendering:
    def test_generation_logged_with_correlation_id(self, captured_logs, service, period_2024):
        asyncio.run(service.generate_profit_loss(period_2024))

        records = captured_logs()
        generated = [r for r in records if r["message"] == "profit_loss_generated"]
        assert len(generated) == 1
        assert generated[0]["statement_type"] == "profit_loss"
        assert generated[0]["period_end"] == "2024-12-31"
        correlation_id = generated[0]["correlation_id"]
        # Builder and validator logs from the same call share the id
        built = [r for r in records if r["message"] == "statement_validated"]
        assert built and all(r["correlation_id"] == correlation_id for r in built)

    def test_separate_calls_get_separate_ids(self, captured_logs, service, period_2024):
        asyncio.run(service.generate_profit_loss(period_2024))
        asyncio.run(service.generate_profit_loss(period_2024))

        ids = {
            r["correlation_id"]
            for r in captured_logs()
            if r["message"] == "profit_loss_generated"
        }
        assert len(ids) == 2

    def test_to_dict_is_json_ready(self, service, period_2024, deterministic_clock):
        deterministic_clock.set_time(datetime(2025, 2, 1, 9, 30, tzinfo=UTC))
        result = asyncio.run(service.generate_profit_loss(period_2024))
        rendered = service.to_dict(result)

        assert rendered["metadata"]["statement_type"] == "profit_loss"
        assert rendered["metadata"]["preparation_date"] == "2025-02-01T09:30:00+00:00"
        assert rendered["data"]["profit_for_period"]["current_period"] == "57000"
        json.dumps(rendered)
