"""
SQL store — read a transaction ledger from any SQL database.

Works with PostgreSQL, MySQL, SQLite, SQL Server, etc. via SQLAlchemy.
Queries run in a worker thread so the event loop stays free and a
cancelled request simply abandons its result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, TypeVar

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    and_,
    create_engine,
    func,
    select,
    text,
)
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from bizledger.errors import StoreError
from bizledger.models.financial import Transaction, TransactionFilters, TransactionPage
from bizledger.store.base import BaseTransactionStore

logger = logging.getLogger("bizledger.store.sql")

T = TypeVar("T")

metadata = MetaData()

categories_table = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", Text, nullable=False),
    Column("type", Text, nullable=False),
    Column("user_id", Integer, nullable=False),
)

transactions_table = Table(
    "transactions",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, nullable=False),
    Column("outlet_id", Integer),
    Column("category_id", Integer, ForeignKey("categories.id"), nullable=False),
    Column("amount", Numeric(15, 2, asdecimal=True), nullable=False),
    Column("description", Text, nullable=False),
    Column("notes", Text),
    Column("type", String(20), nullable=False),
    Column("date", DateTime, nullable=False),
)


class SQLTransactionStore(BaseTransactionStore):
    """Read transactions from a SQL database.

    Expects ``transactions`` and ``categories`` tables shaped like
    :data:`transactions_table` and :data:`categories_table`.

    Usage::

        store = SQLTransactionStore(url="postgresql://...")
        page = await store.query_transactions(owner_id=1)

    Operational errors whose message contains ``retry_on`` are retried up
    to ``max_retries`` attempts, sleeping ``retry_backoff * attempt``
    seconds in between. Every other failure surfaces as :class:`StoreError`.
    """

    name = "sql"
    description = "Read transactions from SQL databases"

    def __init__(
        self,
        url: str | None = None,
        *,
        max_retries: int = 3,
        retry_backoff: float = 2.0,
        retry_on: str = "endpoint is disabled",
        engine: Engine | None = None,
        **options: Any,
    ) -> None:
        super().__init__(**options)
        if engine is None and not url:
            raise ValueError("SQLTransactionStore needs a database url or an engine")
        self.url = url
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self.retry_on = retry_on
        self._engine = engine

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            engine_options = self.options.get("engine_options", {})
            self._engine = create_engine(self.url, pool_pre_ping=True, **engine_options)
        return self._engine

    def create_schema(self) -> None:
        """Create the ledger tables if they do not exist yet."""
        metadata.create_all(self.engine)

    async def query_transactions(
        self,
        owner_id: int,
        filters: TransactionFilters | None = None,
    ) -> TransactionPage:
        filters = filters or TransactionFilters()
        page = await self._execute(self._fetch_page, owner_id, filters)
        logger.debug("Fetched %d of %d transactions for owner %s", len(page.transactions), page.total, owner_id)
        return page

    async def query_all_transactions(self, owner_id: int) -> list[Transaction]:
        return await self._execute(self._fetch_all, owner_id)

    async def ping(self) -> bool:
        await self._execute(self._select_one)
        return True

    async def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()

    # ------------------------------------------------------------------
    # Query helpers (run in a worker thread)
    # ------------------------------------------------------------------

    def _fetch_page(self, owner_id: int, filters: TransactionFilters) -> TransactionPage:
        conditions = _conditions(owner_id, filters)
        t = transactions_table

        query = (
            _joined_select()
            .where(and_(*conditions))
            .order_by(t.c.date.desc(), t.c.id.desc())
            .offset(filters.offset)
        )
        if filters.limit is not None:
            query = query.limit(filters.limit)
        count_query = select(func.count()).select_from(t).where(and_(*conditions))

        with self.engine.connect() as conn:
            rows = conn.execute(query).all()
            total = conn.execute(count_query).scalar_one()

        return TransactionPage(
            transactions=[_to_transaction(row) for row in rows],
            total=total,
            limit=filters.limit,
            offset=filters.offset,
        )

    def _fetch_all(self, owner_id: int) -> list[Transaction]:
        t = transactions_table
        query = _joined_select().where(t.c.user_id == owner_id).order_by(t.c.date.asc(), t.c.id.asc())
        with self.engine.connect() as conn:
            rows = conn.execute(query).all()
        return [_to_transaction(row) for row in rows]

    def _select_one(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    async def _execute(self, operation: Callable[..., T], *args: Any) -> T:
        for attempt in range(1, self.max_retries + 1):
            try:
                return await asyncio.to_thread(operation, *args)
            except OperationalError as e:
                if self.retry_on and self.retry_on in str(e) and attempt < self.max_retries:
                    delay = self.retry_backoff * attempt
                    logger.warning(
                        "Database unavailable, retry %d/%d in %.1fs",
                        attempt,
                        self.max_retries,
                        delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise StoreError(self.name, str(e)) from e
            except SQLAlchemyError as e:
                raise StoreError(self.name, str(e)) from e
        raise StoreError(self.name, "max retries exceeded")


def _joined_select():  # noqa: ANN202
    t, c = transactions_table, categories_table
    return select(t, c.c.name.label("category_name")).select_from(
        t.outerjoin(c, t.c.category_id == c.c.id)
    )


def _conditions(owner_id: int, filters: TransactionFilters) -> list[Any]:
    t = transactions_table
    conditions: list[Any] = [t.c.user_id == owner_id]

    if filters.start_date is not None:
        conditions.append(t.c.date >= filters.start_date)
    if filters.end_date is not None:
        conditions.append(t.c.date <= filters.end_date)
    if filters.category_id is not None:
        conditions.append(t.c.category_id == filters.category_id)
    if filters.type is not None:
        conditions.append(t.c.type == filters.type.value)
    if filters.search:
        conditions.append(t.c.description.ilike(f"%{filters.search}%"))
    if filters.outlet_id == 0:
        conditions.append(t.c.outlet_id.is_(None))
    elif filters.outlet_id is not None:
        conditions.append(t.c.outlet_id == filters.outlet_id)

    return conditions


def _to_transaction(row: Row) -> Transaction:
    return Transaction.model_validate(dict(row._mapping))
