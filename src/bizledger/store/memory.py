"""
In-memory store — a transaction ledger held in Python lists.

Handy for tests, demos and for embedding BizLedger next to data that is
already loaded. Filtering and ordering follow the SQL store exactly.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from bizledger.models.financial import (
    Category,
    Transaction,
    TransactionFilters,
    TransactionPage,
)
from bizledger.store.base import BaseTransactionStore

logger = logging.getLogger("bizledger.store.memory")


class InMemoryTransactionStore(BaseTransactionStore):
    """Keep categories and transactions in memory.

    Usage::

        store = InMemoryTransactionStore()
        store.add_category(Category(id=1, name="Penjualan", type="income", user_id=1))
        store.add_transaction(Transaction(id=1, user_id=1, category_id=1, ...))
        page = await store.query_transactions(1, TransactionFilters(limit=10))
    """

    name = "memory"
    description = "In-process transaction ledger"

    def __init__(
        self,
        transactions: Iterable[Transaction] | None = None,
        categories: Iterable[Category] | None = None,
        **options: Any,
    ) -> None:
        super().__init__(**options)
        self._categories: dict[int, Category] = {}
        self._transactions: list[Transaction] = []
        for category in categories or []:
            self.add_category(category)
        for txn in transactions or []:
            self.add_transaction(txn)

    def __len__(self) -> int:
        return len(self._transactions)

    def add_category(self, category: Category) -> None:
        self._categories[category.id] = category

    def add_transaction(self, transaction: Transaction) -> None:
        self._transactions.append(transaction)

    async def query_transactions(
        self,
        owner_id: int,
        filters: TransactionFilters | None = None,
    ) -> TransactionPage:
        filters = filters or TransactionFilters()
        matches = [t for t in self._transactions if t.user_id == owner_id and _matches(t, filters)]
        matches.sort(key=lambda t: (t.date, t.id), reverse=True)

        end = None if filters.limit is None else filters.offset + filters.limit
        items = [self._joined(t) for t in matches[filters.offset:end]]
        logger.debug("Matched %d of %d transactions for owner %s", len(matches), len(self), owner_id)
        return TransactionPage(
            transactions=items,
            total=len(matches),
            limit=filters.limit,
            offset=filters.offset,
        )

    async def query_all_transactions(self, owner_id: int) -> list[Transaction]:
        owned = [t for t in self._transactions if t.user_id == owner_id]
        owned.sort(key=lambda t: (t.date, t.id))
        return [self._joined(t) for t in owned]

    async def ping(self) -> bool:
        return True

    def _joined(self, txn: Transaction) -> Transaction:
        category = self._categories.get(txn.category_id) if txn.category_id is not None else None
        return txn.model_copy(update={"category_name": category.name if category else None})


def _matches(txn: Transaction, filters: TransactionFilters) -> bool:
    if filters.start_date is not None and txn.date < filters.start_date:
        return False
    if filters.end_date is not None and txn.date > filters.end_date:
        return False
    if filters.category_id is not None and txn.category_id != filters.category_id:
        return False
    if filters.type is not None and txn.type != filters.type:
        return False
    if filters.search and filters.search.lower() not in txn.description.lower():
        return False
    if filters.outlet_id == 0:
        return txn.outlet_id is None
    if filters.outlet_id is not None:
        return txn.outlet_id == filters.outlet_id
    return True
