"""Stores package — read access to transaction ledgers."""
from bizledger.store.base import BaseTransactionStore
from bizledger.store.memory import InMemoryTransactionStore
from bizledger.store.registry import create_store
from bizledger.store.sql import SQLTransactionStore

__all__ = [
    "BaseTransactionStore",
    "InMemoryTransactionStore",
    "SQLTransactionStore",
    "create_store",
]
