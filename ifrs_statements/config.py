"""
Reporting Configuration Schema.

IFRS settings, company presentation settings and the classification
keyword lists, loadable from a dict or a YAML document.  The per-call
CalculationContext is derived from this configuration plus the requested
periods and is never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Self

import yaml

from ifrs_engines.classification import ClassificationKeywords
from ifrs_kernel.domain.ledger import StatementPeriod
from ifrs_kernel.exceptions import ConfigurationError
from ifrs_kernel.logging_config import get_logger

logger = get_logger("statements.config")


def _parse_decimal(value: Any, name: str) -> Decimal:
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"{name} must be a decimal amount, got {value!r}") from exc


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(f"Expected date or ISO date string, got {type(value).__name__}")


@dataclass(frozen=True)
class IFRSSettings:
    """Statement-wide accounting settings."""

    functional_currency: str = "USD"

    # Absolute amount below which a line is not displayed individually
    materiality_threshold: Decimal = Decimal("5")

    # Decimal places for formatted amounts and percentages
    rounding_precision: int = 2

    consolidation_required: bool = False
    accounting_standard: str = "IFRS"
    external_audit_required: bool = False

    def __post_init__(self):
        if len(self.functional_currency) != 3 or not self.functional_currency.isalpha():
            raise ValueError("functional_currency must be a 3-letter ISO 4217 code")
        if self.rounding_precision < 0:
            raise ValueError("rounding_precision cannot be negative")
        if self.materiality_threshold < 0:
            raise ValueError("materiality_threshold cannot be negative")

    @property
    def ifrs_compliant(self) -> bool:
        return self.accounting_standard.strip().upper() == "IFRS"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        values = dict(data)
        if "materiality_threshold" in values:
            values["materiality_threshold"] = _parse_decimal(
                values["materiality_threshold"], "materiality_threshold"
            )
        if "functional_currency" in values:
            values["functional_currency"] = str(values["functional_currency"]).upper()
        return cls(**values)


@dataclass(frozen=True)
class CompanySettings:
    """Presentation-only company details."""

    company_name: str = "Company"


@dataclass(frozen=True)
class ReportingConfig:
    """
    Configuration schema for statement generation.

    ``ledger_inception_date`` bounds the ledger query used for positions:
    balance-sheet and opening balances need every entry since inception.
    """

    ifrs: IFRSSettings = field(default_factory=IFRSSettings)
    company: CompanySettings = field(default_factory=CompanySettings)
    classification: ClassificationKeywords = field(default_factory=ClassificationKeywords)
    ledger_inception_date: date = date(1900, 1, 1)

    @classmethod
    def with_defaults(cls) -> Self:
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """
        Create config from a nested dictionary.

        Raises:
            ConfigurationError: unknown keys or invalid values.
        """
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        try:
            values: dict[str, Any] = {}
            for key, raw in data.items():
                if key == "ifrs":
                    values["ifrs"] = IFRSSettings.from_dict(raw or {})
                elif key == "company":
                    values["company"] = CompanySettings(**(raw or {}))
                elif key == "classification":
                    values["classification"] = ClassificationKeywords.from_dict(raw or {})
                elif key == "ledger_inception_date":
                    values["ledger_inception_date"] = _parse_date(raw)
                else:
                    raise ValueError(f"Unknown configuration section: {key}")
            return cls(**values)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("dict", str(exc)) from exc

    @classmethod
    def from_yaml(cls, path: Path | str) -> Self:
        """Load config from a YAML file (empty file gives defaults)."""
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(str(path), str(exc)) from exc
        if not isinstance(data, Mapping):
            raise ConfigurationError(str(path), "top-level YAML value must be a mapping")
        logger.info("reporting_config_loaded_from_yaml", extra={"path": str(path)})
        return cls.from_dict(data)


@dataclass(frozen=True)
class CalculationContext:
    """Immutable per-call inputs shared by every builder and rule."""

    current_period: StatementPeriod
    prior_period: StatementPeriod | None
    functional_currency: str
    materiality_threshold: Decimal
    rounding_precision: int
    ifrs_compliant: bool
    audit_required: bool
    company_name: str = "Company"
    accounting_standard: str = "IFRS"

    @property
    def has_prior_period(self) -> bool:
        return self.prior_period is not None

    @classmethod
    def build(
        cls,
        config: ReportingConfig,
        period: StatementPeriod,
        prior_period: StatementPeriod | None = None,
    ) -> Self:
        ifrs = config.ifrs
        return cls(
            current_period=period,
            prior_period=prior_period,
            functional_currency=ifrs.functional_currency,
            materiality_threshold=ifrs.materiality_threshold,
            rounding_precision=ifrs.rounding_precision,
            ifrs_compliant=ifrs.ifrs_compliant,
            audit_required=ifrs.external_audit_required,
            company_name=config.company.company_name,
            accounting_standard=ifrs.accounting_standard,
        )
