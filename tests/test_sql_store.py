"""Tests for the SQL transaction store (SQLite-backed)."""

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError

from bizledger.errors import StoreError
from bizledger.models.financial import TransactionFilters
from bizledger.store.sql import SQLTransactionStore, categories_table, transactions_table


def _row(id: int, day: int, amount: str, type: str, **kwargs) -> dict:
    row = {
        "id": id,
        "user_id": 1,
        "outlet_id": None,
        "category_id": 1,
        "amount": Decimal(amount),
        "description": f"Transaksi {id}",
        "notes": None,
        "type": type,
        "date": datetime(2025, 1, day, 9),
    }
    row.update(kwargs)
    return row


@pytest.fixture
def store(tmp_path: Path) -> SQLTransactionStore:
    # A file database: queries run on worker threads, which would each see
    # their own empty in-memory database.
    sql_store = SQLTransactionStore(url=f"sqlite:///{tmp_path / 'ledger.db'}")
    sql_store.create_schema()
    with sql_store.engine.begin() as conn:
        conn.execute(
            categories_table.insert(),
            [
                {"id": 1, "name": "Penjualan", "type": "income", "user_id": 1},
                {"id": 2, "name": "Bahan Baku", "type": "expense", "user_id": 1},
            ],
        )
        conn.execute(
            transactions_table.insert(),
            [
                _row(1, 1, "100000.00", "income", description="Penjualan nasi goreng"),
                _row(2, 2, "30000.50", "expense", category_id=2, description="Beli beras"),
                _row(3, 3, "50000.00", "income", outlet_id=1),
                _row(4, 4, "12500.25", "expense", category_id=99),
                _row(5, 5, "1.00", "income", user_id=2),
            ],
        )
    return sql_store


class TestSQLStoreQueries:
    @pytest.mark.asyncio
    async def test_query_all_ascending(self, store: SQLTransactionStore) -> None:
        ledger = await store.query_all_transactions(1)
        assert [t.id for t in ledger] == [1, 2, 3, 4]
        assert ledger[1].amount == Decimal("30000.50")
        assert ledger[0].category_name == "Penjualan"
        assert ledger[3].category_name is None

    @pytest.mark.asyncio
    async def test_query_page_with_total(self, store: SQLTransactionStore) -> None:
        page = await store.query_transactions(1, TransactionFilters(limit=2))
        assert [t.id for t in page.transactions] == [4, 3]
        assert page.total == 4

    @pytest.mark.asyncio
    async def test_offset_without_limit(self, store: SQLTransactionStore) -> None:
        page = await store.query_transactions(1, TransactionFilters(offset=3))
        assert [t.id for t in page.transactions] == [1]
        assert page.total == 4

    @pytest.mark.asyncio
    async def test_filters(self, store: SQLTransactionStore) -> None:
        page = await store.query_transactions(
            1,
            TransactionFilters(start_date=datetime(2025, 1, 2), end_date=datetime(2025, 1, 4, 9), type="expense"),
        )
        assert [t.id for t in page.transactions] == [4, 2]

    @pytest.mark.asyncio
    async def test_search_case_insensitive(self, store: SQLTransactionStore) -> None:
        page = await store.query_transactions(1, TransactionFilters(search="NASI"))
        assert [t.id for t in page.transactions] == [1]

    @pytest.mark.asyncio
    async def test_outlet_filters(self, store: SQLTransactionStore) -> None:
        head_office = await store.query_transactions(1, TransactionFilters(outlet_id=0))
        outlet = await store.query_transactions(1, TransactionFilters(outlet_id=1))
        assert {t.id for t in head_office.transactions} == {1, 2, 4}
        assert [t.id for t in outlet.transactions] == [3]

    @pytest.mark.asyncio
    async def test_ping(self, store: SQLTransactionStore) -> None:
        health = await store.health_check()
        assert health["healthy"] is True
        await store.close()


class TestSQLStoreErrors:
    def test_requires_url_or_engine(self) -> None:
        with pytest.raises(ValueError):
            SQLTransactionStore()

    @pytest.mark.asyncio
    async def test_missing_tables_raise_store_error(self, tmp_path: Path) -> None:
        store = SQLTransactionStore(url=f"sqlite:///{tmp_path / 'empty.db'}")
        with pytest.raises(StoreError) as excinfo:
            await store.query_all_transactions(1)
        assert excinfo.value.store == "sql"
        assert excinfo.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_unhealthy_store_reports_error(self, tmp_path: Path) -> None:
        store = SQLTransactionStore(url=f"sqlite:///{tmp_path / 'missing' / 'nope.db'}", max_retries=1)
        health = await store.health_check()
        assert health["healthy"] is False
        assert health["error"]

    @pytest.mark.asyncio
    async def test_retries_disabled_endpoint(self) -> None:
        store = SQLTransactionStore(url="sqlite://", retry_backoff=0)
        calls = []

        def flaky() -> str:
            calls.append(1)
            if len(calls) < 3:
                raise OperationalError("SELECT 1", {}, Exception("endpoint is disabled"))
            return "ok"

        assert await store._execute(flaky) == "ok"
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self) -> None:
        store = SQLTransactionStore(url="sqlite://", retry_backoff=0, max_retries=2)
        calls = []

        def always_down() -> None:
            calls.append(1)
            raise OperationalError("SELECT 1", {}, Exception("endpoint is disabled"))

        with pytest.raises(StoreError):
            await store._execute(always_down)
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self) -> None:
        store = SQLTransactionStore(url="sqlite://", retry_backoff=0)
        calls = []

        def broken() -> None:
            calls.append(1)
            raise ProgrammingError("SELECT nope", {}, Exception("syntax error"))

        with pytest.raises(StoreError):
            await store._execute(broken)
        assert len(calls) == 1
