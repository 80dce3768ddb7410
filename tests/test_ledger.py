"""Tests for the shared ledger folds."""

import random
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from bizledger.engine.ledger import (
    bucket_by_category,
    bucket_by_day,
    day_bounds,
    fold_totals,
    running_balance,
    scan,
    signed_amount,
    to_reference,
)
from bizledger.models.financial import Transaction, TransactionFilters
from bizledger.store.memory import InMemoryTransactionStore


def _txn(
    id: int,
    amount: str,
    type: str = "income",
    when: datetime = datetime(2025, 3, 5, 9),
    category: str | None = None,
) -> Transaction:
    return Transaction(
        id=id,
        user_id=1,
        category_id=id,
        amount=Decimal(amount),
        type=type,
        date=when,
        description=f"txn {id}",
        category_name=category,
    )


class TestSignedAmount:
    def test_income_adds(self) -> None:
        assert signed_amount(_txn(1, "100")) == Decimal("100")

    def test_expense_subtracts(self) -> None:
        assert signed_amount(_txn(1, "100", "expense")) == Decimal("-100")


class TestFoldTotals:
    def test_empty(self) -> None:
        totals = fold_totals([])
        assert totals.income == 0
        assert totals.expenses == 0
        assert totals.net == 0
        assert totals.count == 0

    def test_income_and_expenses(self) -> None:
        totals = fold_totals([_txn(1, "100000"), _txn(2, "30000", "expense"), _txn(3, "50000")])
        assert totals.income == Decimal("150000")
        assert totals.expenses == Decimal("30000")
        assert totals.net == Decimal("120000")
        assert totals.count == 3

    def test_order_independent(self) -> None:
        txns = [_txn(i, f"{i}.{i % 10}1", "income" if i % 3 else "expense") for i in range(1, 200)]
        expected = running_balance(txns)
        shuffled = txns[:]
        random.Random(42).shuffle(shuffled)
        assert running_balance(shuffled) == expected
        assert fold_totals(shuffled).net == expected

    def test_no_float_drift(self) -> None:
        txns = [_txn(i, "0.10") for i in range(10)]
        assert running_balance(txns) == Decimal("1.00")

    def test_negative_amounts_pass_through(self) -> None:
        totals = fold_totals([_txn(1, "-50"), _txn(2, "0", "expense")])
        assert totals.income == Decimal("-50")
        assert totals.expenses == 0


class TestRunningBalance:
    def test_opening_balance(self) -> None:
        assert running_balance([_txn(1, "10", "expense")], opening=Decimal("25")) == Decimal("15")


class TestBucketByCategory:
    def test_groups_by_name(self) -> None:
        buckets = bucket_by_category(
            [
                _txn(1, "100", category="Penjualan"),
                _txn(2, "40", "expense", category="Gaji"),
                _txn(3, "60", category="Penjualan"),
                _txn(4, "10", "expense", category="Operasional"),
            ]
        )
        assert buckets.income == {"Penjualan": Decimal("160")}
        assert buckets.expenses == {"Gaji": Decimal("40"), "Operasional": Decimal("10")}
        assert buckets.totals.income == Decimal("160")
        assert buckets.totals.expenses == Decimal("50")

    def test_uncategorized_fallback(self) -> None:
        buckets = bucket_by_category([_txn(1, "75", "expense"), _txn(2, "25", "expense", category="Gaji")])
        assert buckets.expenses["Uncategorized"] == Decimal("75")
        assert sum(buckets.expenses.values()) == buckets.totals.expenses

    def test_custom_label(self) -> None:
        buckets = bucket_by_category([_txn(1, "5")], uncategorized_label="Tidak Dikategorikan")
        assert buckets.income == {"Tidak Dikategorikan": Decimal("5")}

    def test_first_seen_order(self) -> None:
        buckets = bucket_by_category(
            [_txn(1, "1", category="B"), _txn(2, "9", category="A"), _txn(3, "5", category="B")]
        )
        assert list(buckets.income) == ["B", "A"]


class TestBucketByDay:
    def test_signed_daily_deltas(self) -> None:
        days = [date(2025, 3, 4), date(2025, 3, 5), date(2025, 3, 6)]
        deltas = bucket_by_day(
            [
                _txn(1, "100", when=datetime(2025, 3, 5, 9)),
                _txn(2, "30", "expense", when=datetime(2025, 3, 5, 23, 59)),
                _txn(3, "999", when=datetime(2025, 3, 1)),
            ],
            days,
        )
        assert deltas == {date(2025, 3, 4): 0, date(2025, 3, 5): Decimal("70"), date(2025, 3, 6): 0}

    def test_midnight_belongs_to_new_day(self) -> None:
        deltas = bucket_by_day([_txn(1, "10", when=datetime(2025, 3, 6))], [date(2025, 3, 5), date(2025, 3, 6)])
        assert deltas[date(2025, 3, 5)] == 0
        assert deltas[date(2025, 3, 6)] == Decimal("10")

    def test_aware_dates_use_reference_timezone(self) -> None:
        jakarta = timezone(timedelta(hours=7))
        # 20:00 UTC on the 5th is 03:00 on the 6th in Jakarta.
        txn = _txn(1, "10", when=datetime(2025, 3, 5, 20, tzinfo=timezone.utc))
        deltas = bucket_by_day([txn], [date(2025, 3, 5), date(2025, 3, 6)], jakarta)
        assert deltas[date(2025, 3, 6)] == Decimal("10")


class TestTimeHelpers:
    def test_to_reference_naive_passthrough(self) -> None:
        value = datetime(2025, 3, 5, 9)
        assert to_reference(value, None) is value

    def test_to_reference_aware_without_tz(self) -> None:
        value = datetime(2025, 3, 5, 9, tzinfo=timezone(timedelta(hours=7)))
        assert to_reference(value, None) == datetime(2025, 3, 5, 2)

    def test_to_reference_naive_with_tz(self) -> None:
        tz = timezone(timedelta(hours=7))
        assert to_reference(datetime(2025, 3, 5, 9), tz) == datetime(2025, 3, 5, 9, tzinfo=tz)

    def test_day_bounds(self) -> None:
        start, end = day_bounds(date(2025, 3, 5))
        assert start == datetime(2025, 3, 5)
        assert end == datetime(2025, 3, 6)


class TestScan:
    @pytest.mark.asyncio
    async def test_scan_reads_from_store(self) -> None:
        store = InMemoryTransactionStore([_txn(1, "10"), _txn(2, "20", "expense")])
        page = await scan(store, 1, TransactionFilters(type="expense"))
        assert page.total == 1
        assert page.transactions[0].id == 2

    @pytest.mark.asyncio
    async def test_scan_without_filters(self) -> None:
        store = InMemoryTransactionStore([_txn(1, "10"), _txn(2, "20")])
        page = await scan(store, 1)
        assert page.total == 2
