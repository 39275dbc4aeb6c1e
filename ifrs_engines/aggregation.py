"""
ifrs_engines.aggregation -- BalanceAggregator.

Responsibility:
    Fold journal lines into per-account signed balances, applying the
    normal-balance rule for each account type:

        ASSET, EXPENSE                 -> debit - credit
        LIABILITY, EQUITY, REVENUE     -> credit - debit

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Consumes the ledger value
    objects from ifrs_kernel.domain.ledger.

Invariants enforced:
    - Every account in the chart appears in the result, zero if untouched.
    - Lines referencing accounts absent from the chart are ignored.
    - Pure summation: the result does not depend on entry or line order.

Failure modes:
    None.  Empty inputs return zero balances.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from decimal import Decimal
from uuid import UUID

from ifrs_engines.tracer import traced_engine
from ifrs_kernel.domain.ledger import (
    Account,
    AccountType,
    JournalEntry,
    StatementPeriod,
)
from ifrs_kernel.logging_config import get_logger

logger = get_logger("engines.aggregation")

ZERO = Decimal("0")


def signed_amount(account_type: AccountType, debit: Decimal, credit: Decimal) -> Decimal:
    """Apply the normal-balance sign rule to one debit/credit pair."""
    if account_type.is_debit_normal:
        return debit - credit
    return credit - debit


def total_for(balances: Mapping[UUID, Decimal], accounts: Iterable[Account]) -> Decimal:
    return sum((balances.get(a.account_id, ZERO) for a in accounts), ZERO)


class BalanceAggregator:
    """
    Stateless balance folding over an immutable ledger snapshot.

    Contract:
        ``aggregate`` covers the entries dated inside a period (activity);
        ``aggregate_as_of`` covers every entry dated on or before a date
        (position).  Both return a fresh dict keyed by account_id.
    """

    @traced_engine("balance_aggregator", "1.0", fingerprint_fields=("period",))
    def aggregate(
        self,
        accounts: Sequence[Account],
        entries: Iterable[JournalEntry],
        period: StatementPeriod,
    ) -> dict[UUID, Decimal]:
        return self._fold(accounts, (e for e in entries if period.contains(e.entry_date)))

    @traced_engine("balance_aggregator", "1.0", fingerprint_fields=("as_of",))
    def aggregate_as_of(
        self,
        accounts: Sequence[Account],
        entries: Iterable[JournalEntry],
        as_of: date,
    ) -> dict[UUID, Decimal]:
        return self._fold(accounts, (e for e in entries if e.entry_date <= as_of))

    def unknown_account_ids(
        self,
        accounts: Sequence[Account],
        entries: Iterable[JournalEntry],
    ) -> frozenset[UUID]:
        """Account ids referenced by lines but missing from the chart."""
        known = {a.account_id for a in accounts}
        return frozenset(
            line.account_id
            for entry in entries
            for line in entry.lines
            if line.account_id not in known
        )

    def _fold(
        self,
        accounts: Sequence[Account],
        entries: Iterable[JournalEntry],
    ) -> dict[UUID, Decimal]:
        types = {a.account_id: a.account_type for a in accounts}
        balances: dict[UUID, Decimal] = {a.account_id: ZERO for a in accounts}
        ignored = 0

        for entry in entries:
            for line in entry.lines:
                account_type = types.get(line.account_id)
                if account_type is None:
                    ignored += 1
                    continue
                balances[line.account_id] += signed_amount(
                    account_type, line.debit, line.credit
                )

        if ignored:
            logger.debug("journal_lines_ignored_unknown_account", extra={"line_count": ignored})
        return balances
