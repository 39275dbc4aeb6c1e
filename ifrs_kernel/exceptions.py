"""
Typed exception hierarchy for the IFRS reporting pipeline.

===============================================================================
WHAT RAISES AND WHAT DOES NOT
===============================================================================

Statement generation distinguishes three kinds of trouble:

  1. Structural failures: a collaborator (chart of accounts, ledger, fixed
     asset register) failed or returned unusable data. The whole generation
     call aborts with a StructuralError subclass. No partial result exists.
  2. Computation failures: an arithmetic step would divide by zero. The
     strict helpers raise ComputationError; the builders use the lenient
     helpers in ifrs_engines.arithmetic, which return None or zero instead.
     A caller never sees NaN or Infinity.
  3. Business findings: missing comparatives, reconciliation differences,
     zero revenue. These are NEVER raised. They are collected as
     StatementValidationResult entries on the result.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ReportingError (base)
    |
    +-- StructuralError
    |   +-- ChartOfAccountsUnavailableError
    |   +-- LedgerUnavailableError
    |   +-- FixedAssetRegisterUnavailableError
    |
    +-- ComputationError
    |
    +-- InvalidPeriodError        (also a ValueError)
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                          | When Raised
------------------------------|------------------------------------------------
STRUCTURAL_ERROR              | A required collaborator call failed
CHART_OF_ACCOUNTS_UNAVAILABLE | Chart of accounts fetch failed
LEDGER_UNAVAILABLE            | Journal entry fetch failed
FIXED_ASSET_REGISTER_UNAVAILABLE | Fixed asset fetch failed
COMPUTATION_ERROR             | Strict division by zero
INVALID_PERIOD                | Period start date after end date
INVALID_CONFIGURATION         | Unreadable or invalid reporting configuration

===============================================================================
HANDLING PATTERN
===============================================================================

    try:
        result = await service.generate_balance_sheet(period)
    except StructuralError as e:
        log.error("generation_aborted", extra={"code": e.code})
        raise
    errors = [f for f in result.validation if f.severity == "error"]
"""


class ReportingError(Exception):
    """
    Base exception for all reporting errors.

    Every subclass has a `code` class attribute for machine-readable
    identification.
    """

    code: str = "REPORTING_ERROR"


# Structural failures


class StructuralError(ReportingError):
    """A required collaborator call failed; the generation call is aborted."""

    code: str = "STRUCTURAL_ERROR"

    def __init__(self, collaborator: str, reason: str):
        self.collaborator = collaborator
        self.reason = reason
        super().__init__(f"{collaborator} failed: {reason}")


class ChartOfAccountsUnavailableError(StructuralError):
    code: str = "CHART_OF_ACCOUNTS_UNAVAILABLE"

    def __init__(self, reason: str):
        super().__init__("ChartOfAccountsProvider", reason)


class LedgerUnavailableError(StructuralError):
    code: str = "LEDGER_UNAVAILABLE"

    def __init__(self, reason: str):
        super().__init__("LedgerAccessor", reason)


class FixedAssetRegisterUnavailableError(StructuralError):
    code: str = "FIXED_ASSET_REGISTER_UNAVAILABLE"

    def __init__(self, reason: str):
        super().__init__("FixedAssetAdjustmentProvider", reason)


# Arithmetic


class ComputationError(ReportingError):
    """An operation would produce a non-finite result."""

    code: str = "COMPUTATION_ERROR"

    def __init__(self, operation: str, numerator, denominator):
        self.operation = operation
        self.numerator = numerator
        self.denominator = denominator
        super().__init__(
            f"Cannot compute {operation}: {numerator} / {denominator}"
        )


# Inputs


class InvalidPeriodError(ReportingError, ValueError):
    """Statement period start date falls after its end date."""

    code: str = "INVALID_PERIOD"

    def __init__(self, start_date, end_date):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Period start {start_date} is after period end {end_date}"
        )


class ConfigurationError(ReportingError):
    """Reporting configuration could not be loaded or is invalid."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid reporting configuration ({source}): {reason}")
