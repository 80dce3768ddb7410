"""Exception hierarchy for BizLedger."""

from __future__ import annotations


class BizLedgerError(Exception):
    """Base class for all BizLedger errors."""


class ConfigError(BizLedgerError, ValueError):
    """Configuration cannot be turned into a working component."""


class StoreError(BizLedgerError):
    """A transaction store failed to answer a query.

    The original driver exception is chained as ``__cause__``.
    """

    def __init__(self, store: str, message: str) -> None:
        super().__init__(f"{store}: {message}")
        self.store = store
