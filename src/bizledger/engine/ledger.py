"""
Ledger scan & bucketing — the folds shared by the dashboard and reports.

Every sum is a :class:`~decimal.Decimal`; addition is exact, so the
result of a fold does not depend on the order of the transactions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from bizledger.models.financial import Transaction, TransactionFilters, TransactionPage

if TYPE_CHECKING:
    from bizledger.store.base import BaseTransactionStore

ZERO = Decimal(0)


@dataclass
class LedgerTotals:
    """Income and expense accumulators for one fold."""

    income: Decimal = ZERO
    expenses: Decimal = ZERO
    count: int = 0

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses

    def add(self, txn: Transaction) -> None:
        if txn.is_income:
            self.income += txn.amount
        else:
            self.expenses += txn.amount
        self.count += 1


@dataclass
class CategoryBuckets:
    """Per-category sums, keyed by category name in first-seen order."""

    income: dict[str, Decimal] = field(default_factory=dict)
    expenses: dict[str, Decimal] = field(default_factory=dict)
    totals: LedgerTotals = field(default_factory=LedgerTotals)


def signed_amount(txn: Transaction) -> Decimal:
    """Cash effect of a transaction: income adds, everything else subtracts."""
    return txn.amount if txn.is_income else -txn.amount


def fold_totals(transactions: Iterable[Transaction]) -> LedgerTotals:
    totals = LedgerTotals()
    for txn in transactions:
        totals.add(txn)
    return totals


def running_balance(transactions: Iterable[Transaction], opening: Decimal = ZERO) -> Decimal:
    balance = opening
    for txn in transactions:
        balance += signed_amount(txn)
    return balance


def bucket_by_category(
    transactions: Iterable[Transaction],
    uncategorized_label: str = "Uncategorized",
) -> CategoryBuckets:
    """Sum income and expenses per category name.

    Transactions whose category could not be resolved land in the
    ``uncategorized_label`` bucket; nothing is dropped.
    """
    buckets = CategoryBuckets()
    for txn in transactions:
        name = txn.category_name or uncategorized_label
        target = buckets.income if txn.is_income else buckets.expenses
        target[name] = target.get(name, ZERO) + txn.amount
        buckets.totals.add(txn)
    return buckets


def bucket_by_day(
    transactions: Iterable[Transaction],
    days: Iterable[date],
    tz: tzinfo | None = None,
) -> dict[date, Decimal]:
    """Signed daily deltas for each of ``days``.

    A transaction belongs to a day when its date, seen in ``tz``, falls in
    ``[day 00:00, next day 00:00)``. Transactions outside ``days`` are ignored.
    """
    deltas: dict[date, Decimal] = {day: ZERO for day in days}
    for txn in transactions:
        day = to_reference(txn.date, tz).date()
        if day in deltas:
            deltas[day] += signed_amount(txn)
    return deltas


def to_reference(value: datetime, tz: tzinfo | None) -> datetime:
    """Express ``value`` in the reference timezone.

    With no reference timezone, aware values become naive UTC. Naive values
    are assumed to already be in the reference timezone.
    """
    if tz is None:
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def day_start(day: date, tz: tzinfo | None = None) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def day_bounds(day: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` interval covering ``day``."""
    start = day_start(day, tz)
    return start, start + timedelta(days=1)


async def scan(
    store: BaseTransactionStore,
    owner_id: int,
    filters: TransactionFilters | None = None,
) -> TransactionPage:
    """Read one owner's matching transactions and their total count."""
    return await store.query_transactions(owner_id, filters or TransactionFilters())
