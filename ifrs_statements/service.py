"""
ReportingService -- async orchestration boundary for the four IFRS statements.

Responsibility:
    Fetch the chart of accounts, journal entries and fixed asset register
    once per generation call, hand the immutable snapshot to the pure
    statement builders, validate the result and wrap it with metadata and
    timing.

Architecture position:
    Statements layer, outermost.  The only module that awaits collaborators;
    everything below it (builders, engines, compliance rules) is synchronous
    and side-effect free apart from logging.

Invariants enforced:
    - One snapshot per call.  Collaborators are re-queried on every call and
      nothing is cached between calls, so concurrent calls for different
      periods never share intermediate state.
    - Atomic generation.  A collaborator failure aborts the call with a
      StructuralError; no partial StatementCalculationResult is returned.
    - Validation findings never abort a call.  Error findings are surfaced
      as result warnings and on ``has_errors``.

Failure modes:
    - ChartOfAccountsUnavailableError, LedgerUnavailableError,
      FixedAssetRegisterUnavailableError when the matching fetch raises or
      returns nothing usable.
    - InvalidPeriodError is raised earlier, when the StatementPeriod is built.

Audit relevance:
    Each call runs under a fresh correlation id bound into LogContext, so
    every log line of one generation (fetch, build, validation) can be
    grouped afterwards.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable
from typing import Any
from uuid import uuid4

from ifrs_engines.aggregation import BalanceAggregator
from ifrs_engines.classification import SectionClassifier
from ifrs_engines.depreciation import DerivedAdjustmentCalculator, FixedAssetAdjustmentProvider
from ifrs_engines.reconciliation import ReconciliationEngine
from ifrs_kernel.domain.clock import Clock, SystemClock
from ifrs_kernel.domain.collaborators import (
    ChartOfAccountsProvider,
    FixedAssetRegister,
    LedgerAccessor,
)
from ifrs_kernel.domain.ledger import StatementPeriod
from ifrs_kernel.exceptions import (
    ChartOfAccountsUnavailableError,
    FixedAssetRegisterUnavailableError,
    LedgerUnavailableError,
    StructuralError,
)
from ifrs_kernel.logging_config import LogContext, get_logger
from ifrs_statements.balance_sheet import BalanceSheetBuilder
from ifrs_statements.base import LedgerSnapshot, StatementBuilder
from ifrs_statements.cash_flow import CashFlowBuilder
from ifrs_statements.compliance import ComplianceValidator
from ifrs_statements.config import CalculationContext, ReportingConfig
from ifrs_statements.equity_changes import EquityChangesBuilder
from ifrs_statements.formatting import CurrencyFormatter
from ifrs_statements.models import (
    BalanceSheetData,
    CashFlowData,
    CashFlowMethod,
    EquityChangesData,
    FinancialStatementPackage,
    ProfitLossData,
    Severity,
    StatementCalculationResult,
    StatementMetadata,
    StatementType,
    StatementValidationResult,
)
from ifrs_statements.profit_loss import ProfitLossBuilder
from ifrs_statements.providers import InMemoryFixedAssetRegister
from ifrs_statements.rendering import render_to_dict
from ifrs_statements.summary import summarize

logger = get_logger("statements.service")


class ReportingService:
    """
    Generates IFRS primary statements from injected collaborators.

    Usage:
        service = ReportingService(chart=chart, ledger=ledger)
        result = asyncio.run(service.generate_profit_loss(period))
    """

    def __init__(
        self,
        chart: ChartOfAccountsProvider,
        ledger: LedgerAccessor,
        fixed_assets: FixedAssetRegister | None = None,
        config: ReportingConfig | None = None,
        clock: Clock | None = None,
        formatter: CurrencyFormatter | None = None,
        adjustment_provider: FixedAssetAdjustmentProvider | None = None,
        validator: ComplianceValidator | None = None,
        reconciliation: ReconciliationEngine | None = None,
    ):
        self._chart = chart
        self._ledger = ledger
        self._fixed_assets = fixed_assets or InMemoryFixedAssetRegister()
        self._config = config or ReportingConfig.with_defaults()
        self._clock = clock or SystemClock()
        self._validator = validator or ComplianceValidator()
        self._reconciliation = reconciliation or ReconciliationEngine()

        self._classifier = SectionClassifier(self._config.classification)
        self._aggregator = BalanceAggregator()
        shared = dict(
            classifier=self._classifier,
            aggregator=self._aggregator,
            adjustments=DerivedAdjustmentCalculator(adjustment_provider),
            formatter=formatter,
        )
        self._profit_loss = ProfitLossBuilder(**shared)
        self._balance_sheet = BalanceSheetBuilder(**shared)
        self._equity_changes = EquityChangesBuilder(**shared)
        self._cash_flow = {
            method: CashFlowBuilder(
                **shared, method=method, reconciliation=self._reconciliation
            )
            for method in CashFlowMethod
        }

        logger.info(
            "reporting_service_initialized",
            extra={
                "company_name": self._config.company.company_name,
                "functional_currency": self._config.ifrs.functional_currency,
                "ifrs_compliant": self._config.ifrs.ifrs_compliant,
            },
        )

    @property
    def config(self) -> ReportingConfig:
        return self._config

    # =========================================================================
    # Internal helpers
    # =========================================================================

    @staticmethod
    async def _fetch(
        call: Awaitable[Any],
        error: type[StructuralError],
    ) -> tuple:
        try:
            result = await call
        except StructuralError:
            raise
        except Exception as exc:
            raise error(f"{type(exc).__name__}: {exc}") from exc
        if result is None:
            raise error("collaborator returned no data")
        return tuple(result)

    async def _load_snapshot(
        self,
        period: StatementPeriod,
        prior_period: StatementPeriod | None,
    ) -> LedgerSnapshot:
        """Issue the three collaborator fetches concurrently."""
        latest = period.end_date
        if prior_period is not None and prior_period.end_date > latest:
            latest = prior_period.end_date
        start = self._config.ledger_inception_date

        accounts, entries, assets = await asyncio.gather(
            self._fetch(self._chart.get_all_accounts(), ChartOfAccountsUnavailableError),
            self._fetch(
                self._ledger.get_entries_for_period(start, latest),
                LedgerUnavailableError,
            ),
            self._fetch(
                self._fixed_assets.get_fixed_assets(),
                FixedAssetRegisterUnavailableError,
            ),
        )

        logger.debug(
            "ledger_snapshot_loaded",
            extra={
                "account_count": len(accounts),
                "entry_count": len(entries),
                "fixed_asset_count": len(assets),
                "ledger_start": start.isoformat(),
                "ledger_end": latest.isoformat(),
            },
        )
        return LedgerSnapshot(accounts=accounts, entries=entries, fixed_assets=assets)

    def _build_metadata(
        self,
        builder: StatementBuilder,
        context: CalculationContext,
    ) -> StatementMetadata:
        return StatementMetadata(
            company_name=context.company_name,
            statement_title=builder.title,
            statement_type=builder.statement_type,
            period=context.current_period,
            prior_period=context.prior_period,
            currency=context.functional_currency,
            preparation_date=self._clock.now(),
            accounting_standard=context.accounting_standard,
            audit_status="Unaudited" if context.audit_required else "Not required",
        )

    def _warnings(
        self,
        snapshot: LedgerSnapshot,
        validation: tuple[StatementValidationResult, ...],
    ) -> tuple[str, ...]:
        warnings = [f.message for f in validation if f.severity is Severity.ERROR]
        unknown = self._aggregator.unknown_account_ids(snapshot.accounts, snapshot.entries)
        if unknown:
            warnings.append(
                f"{len(unknown)} account(s) referenced by journal lines are missing "
                "from the chart of accounts and were ignored"
            )
        return tuple(warnings)

    def _run(
        self,
        builder: StatementBuilder,
        snapshot: LedgerSnapshot,
        context: CalculationContext,
    ) -> StatementCalculationResult:
        started = time.perf_counter()
        data = builder.build(snapshot, context)
        validation = self._validator.validate(builder.statement_type, data, context)
        metadata = self._build_metadata(builder, context)
        elapsed_ms = (time.perf_counter() - started) * 1000
        return StatementCalculationResult(
            data=data,
            validation=validation,
            metadata=metadata,
            calculation_time_ms=elapsed_ms,
            warnings=self._warnings(snapshot, validation),
        )

    async def _generate(
        self,
        builder: StatementBuilder,
        period: StatementPeriod,
        prior_period: StatementPeriod | None,
    ) -> StatementCalculationResult:
        with LogContext.bind(
            correlation_id=str(uuid4()),
            statement_type=builder.statement_type.value,
            period_end=period.end_date.isoformat(),
        ):
            snapshot = await self._load_snapshot(period, prior_period)
            context = CalculationContext.build(self._config, period, prior_period)
            result = self._run(builder, snapshot, context)

            logger.info(
                f"{builder.statement_type.value}_generated",
                extra={
                    "period": str(period),
                    "finding_count": len(result.validation),
                    "has_errors": result.has_errors,
                    "duration_ms": round(result.calculation_time_ms, 3),
                },
            )
            return result

    def _cross_statement_findings(
        self,
        snapshot: LedgerSnapshot,
        profit_loss: ProfitLossData,
        balance_sheet: BalanceSheetData,
        equity_changes: EquityChangesData,
    ) -> tuple[StatementValidationResult, ...]:
        findings: list[StatementValidationResult] = []

        profit = self._reconciliation.reconcile_profit_to_equity(
            profit_loss.profit_for_period.current_period,
            equity_changes.profit_for_period,
        )
        if not profit.is_reconciled:
            findings.append(
                StatementValidationResult(
                    statement_type=StatementType.EQUITY_CHANGES,
                    rule_name="PROFIT_EQUITY_RECONCILIATION",
                    severity=Severity.ERROR,
                    message=(
                        "Profit in the statement of changes in equity does not agree "
                        f"with profit or loss (difference {profit.difference})"
                    ),
                    suggestion="Check revenue and expense account classifications",
                    ifrs_reference="IAS 1.106",
                )
            )

        equity = self._reconciliation.reconcile_equity_to_balance_sheet(
            equity_changes.closing_total,
            balance_sheet.total_equity,
        )
        if not equity.is_reconciled:
            findings.append(
                StatementValidationResult(
                    statement_type=StatementType.EQUITY_CHANGES,
                    rule_name="EQUITY_BALANCE_RECONCILIATION",
                    severity=Severity.ERROR,
                    message=(
                        "Closing equity does not agree with total equity in the "
                        f"statement of financial position (difference {equity.difference})"
                    ),
                    suggestion="Check equity component classifications",
                    ifrs_reference="IAS 1.106",
                )
            )

        names = {a.account_id: a.name for a in snapshot.accounts}
        for account_id, kinds in self._classifier.overlaps(snapshot.accounts).items():
            findings.append(
                StatementValidationResult(
                    statement_type=StatementType.PROFIT_LOSS,
                    rule_name="CLASSIFICATION_OVERLAP",
                    severity=Severity.WARNING,
                    message=(
                        f"Account '{names[account_id]}' is presented in more than one "
                        f"section: {', '.join(k.value for k in kinds)}"
                    ),
                    suggestion="Set an explicit subcategory on the account",
                    ifrs_reference="IAS 1.29",
                )
            )
        return tuple(findings)

    # =========================================================================
    # Public API
    # =========================================================================

    async def generate_profit_loss(
        self,
        period: StatementPeriod,
        prior_period: StatementPeriod | None = None,
    ) -> StatementCalculationResult[ProfitLossData]:
        """
        Generate the statement of profit or loss.

        Args:
            period: Reporting period.
            prior_period: Optional comparative period.

        Returns:
            StatementCalculationResult wrapping ProfitLossData.
        """
        return await self._generate(self._profit_loss, period, prior_period)

    async def generate_balance_sheet(
        self,
        period: StatementPeriod,
        prior_period: StatementPeriod | None = None,
    ) -> StatementCalculationResult[BalanceSheetData]:
        """
        Generate the statement of financial position as of ``period.end_date``.

        Args:
            period: Reporting period; positions are taken at its end date.
            prior_period: Optional comparative period.

        Returns:
            StatementCalculationResult wrapping BalanceSheetData.
        """
        return await self._generate(self._balance_sheet, period, prior_period)

    async def generate_cash_flow(
        self,
        period: StatementPeriod,
        prior_period: StatementPeriod | None = None,
        method: CashFlowMethod = CashFlowMethod.INDIRECT,
    ) -> StatementCalculationResult[CashFlowData]:
        """
        Generate the statement of cash flows.

        Args:
            period: Reporting period.
            prior_period: Optional comparative period.
            method: Indirect (default) or direct presentation of operating
                activities.  Both yield the same operating total.

        Returns:
            StatementCalculationResult wrapping CashFlowData.
        """
        return await self._generate(self._cash_flow[method], period, prior_period)

    async def generate_equity_changes(
        self,
        period: StatementPeriod,
        prior_period: StatementPeriod | None = None,
    ) -> StatementCalculationResult[EquityChangesData]:
        """
        Generate the statement of changes in equity.

        Args:
            period: Reporting period.
            prior_period: Optional comparative period.

        Returns:
            StatementCalculationResult wrapping EquityChangesData.
        """
        return await self._generate(self._equity_changes, period, prior_period)

    async def generate_all(
        self,
        period: StatementPeriod,
        prior_period: StatementPeriod | None = None,
        method: CashFlowMethod = CashFlowMethod.INDIRECT,
    ) -> FinancialStatementPackage:
        """
        Generate all four statements from one snapshot and cross-check them.

        Cross-statement findings cover profit-to-equity agreement, closing
        equity against the statement of financial position, and accounts
        classified into more than one profit or loss section.
        The package also carries a FinancialSummary of key ratios and
        highlights.

        Returns:
            FinancialStatementPackage.
        """
        with LogContext.bind(
            correlation_id=str(uuid4()),
            period_end=period.end_date.isoformat(),
        ):
            snapshot = await self._load_snapshot(period, prior_period)
            context = CalculationContext.build(self._config, period, prior_period)

            profit_loss = self._run(self._profit_loss, snapshot, context)
            balance_sheet = self._run(self._balance_sheet, snapshot, context)
            cash_flow = self._run(self._cash_flow[method], snapshot, context)
            equity_changes = self._run(self._equity_changes, snapshot, context)

            package = FinancialStatementPackage(
                profit_loss=profit_loss,
                balance_sheet=balance_sheet,
                cash_flow=cash_flow,
                equity_changes=equity_changes,
                summary=summarize(
                    profit_loss.data,
                    balance_sheet.data,
                    cash_flow.data,
                    self._profit_loss.section_builder(context).fmt,
                ),
                cross_statement_validation=self._cross_statement_findings(
                    snapshot, profit_loss.data, balance_sheet.data, equity_changes.data
                ),
            )

            logger.info(
                "financial_statements_generated",
                extra={
                    "period": str(period),
                    "cash_flow_method": method.value,
                    "cross_statement_finding_count": len(package.cross_statement_validation),
                    "has_errors": package.has_errors,
                    "highlight_count": len(package.summary.highlights),
                },
            )
            return package

    def to_dict(self, result: object) -> dict:
        """Convert a result or package to JSON-safe primitives."""
        return render_to_dict(result)
