"""
Time source for statement metadata.

The preparation date is the only wall-clock value in a
StatementCalculationResult.  ReportingService reads it from the Clock it was
constructed with; nothing else in the pipeline asks for the current time.
"""

from datetime import UTC, date, datetime, timedelta
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime:
        """Current time, timezone-aware."""
        ...

    def today(self) -> date:
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)

    def today(self) -> date:
        return self.now().date()


def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        raise ValueError(f"Clock time must be timezone-aware, got {moment!r}")
    return moment


class DeterministicClock:
    """
    Clock that only moves when told to.

    Two generation calls against the same clock carry the same preparation
    date, which keeps rendered results byte-identical in tests.
    """

    DEFAULT_TIME = datetime(2025, 1, 15, 9, 0, tzinfo=UTC)

    def __init__(self, current: datetime | None = None):
        self._current = _aware(current or self.DEFAULT_TIME)

    def now(self) -> datetime:
        return self._current

    def today(self) -> date:
        return self._current.date()

    def set_time(self, moment: datetime) -> None:
        self._current = _aware(moment)

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)
