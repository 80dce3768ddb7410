"""
Base store — abstract read interface over an owner's transaction ledger.

Stores are the bridge between BizLedger and wherever transactions live.
The aggregation engine only ever reads through this interface; creating,
editing and deleting transactions is somebody else's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bizledger.models.financial import Transaction, TransactionFilters, TransactionPage


class BaseTransactionStore(ABC):
    """Abstract base class for all transaction stores.

    To create a new store, subclass this and implement:
    - `name`: Unique store identifier.
    - `query_transactions()`: Filtered, paginated read with a total count.
    - `query_all_transactions()`: Every transaction of one owner, oldest first.
    - `ping()`: Check that the backing storage is reachable.

    Every query is scoped to exactly one owner. Returned transactions carry
    the name of their category in ``category_name`` (``None`` when the
    category cannot be resolved).

    Example::

        class MyStore(BaseTransactionStore):
            name = "my_store"

            async def query_transactions(self, owner_id, filters=None):
                ...

            async def query_all_transactions(self, owner_id):
                ...

            async def ping(self) -> bool:
                ...
    """

    name: str = "base"
    description: str = "Base transaction store"

    def __init__(self, **options: Any) -> None:
        self.options = options

    @abstractmethod
    async def query_transactions(
        self,
        owner_id: int,
        filters: TransactionFilters | None = None,
    ) -> TransactionPage:
        """Return matching transactions, newest first, and the unpaginated match count."""
        ...

    @abstractmethod
    async def query_all_transactions(self, owner_id: int) -> list[Transaction]:
        """Return the owner's whole ledger ordered by date ascending (ties by id)."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the backing storage answers."""
        ...

    async def close(self) -> None:
        """Release any held resources."""

    async def health_check(self) -> dict[str, Any]:
        """Check store health and connectivity."""
        try:
            healthy = await self.ping()
            return {"store": self.name, "healthy": healthy, "error": None}
        except Exception as e:
            return {"store": self.name, "healthy": False, "error": str(e)}
