"""
BizLedger — Main orchestrator.

The BizLedger class is the top-level entry point that wires the
configured transaction store to the aggregation engine.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from bizledger.config import BizLedgerConfig
from bizledger.engine.dashboard import DashboardCalculator
from bizledger.engine.ledger import scan
from bizledger.engine.report import FinancialReportGenerator
from bizledger.models.financial import TransactionFilters, TransactionPage
from bizledger.models.report import DashboardStats, FinancialReport
from bizledger.store.base import BaseTransactionStore
from bizledger.store.registry import create_store

logger = logging.getLogger("bizledger")


@dataclass
class BizLedger:
    """Top-level orchestrator for BizLedger.

    Usage::

        from bizledger import BizLedger

        ledger = BizLedger.from_config("bizledger.yaml")
        stats = await ledger.dashboard_stats(owner_id=1)
        report = await ledger.financial_report(1, date(2025, 1, 1), date(2025, 1, 31))

    Every call reads fresh data from the store; nothing is cached between
    calls.
    """

    config: BizLedgerConfig = field(default_factory=BizLedgerConfig)
    store: BaseTransactionStore | None = None
    _dashboard: DashboardCalculator | None = field(default=None, init=False, repr=False)
    _reports: FinancialReportGenerator | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> BizLedger:
        """Create a BizLedger instance from a config file or keyword arguments."""
        config = BizLedgerConfig.load(config_path, **overrides)
        instance = cls(config=config)
        instance._setup()
        return instance

    def _setup(self) -> None:
        """Build the store (unless one was given) and the engine components."""
        if self.store is None:
            self.store = create_store(self.config.store)
        self._dashboard = DashboardCalculator(self.store, self.config.engine)
        self._reports = FinancialReportGenerator(self.store, self.config.engine)
        logger.info("BizLedger initialized with %s store", self.store.name)

    async def dashboard_stats(self, owner_id: int, now: datetime | None = None) -> DashboardStats:
        """Dashboard snapshot for ``owner_id`` as of ``now`` (default: the local wall clock)."""
        if self._dashboard is None:
            self._setup()
        assert self._dashboard is not None
        return await self._dashboard.compute(owner_id, now or datetime.now())

    async def financial_report(
        self,
        owner_id: int,
        start_date: date | datetime,
        end_date: date | datetime,
        outlet_id: int | None = None,
    ) -> FinancialReport:
        """Financial report for ``owner_id`` over ``[start_date, end_date]``."""
        if self._reports is None:
            self._setup()
        assert self._reports is not None
        return await self._reports.generate(owner_id, start_date, end_date, outlet_id)

    async def list_transactions(
        self,
        owner_id: int,
        filters: TransactionFilters | None = None,
    ) -> TransactionPage:
        """One page of the owner's transactions, newest first."""
        if self.store is None:
            self._setup()
        assert self.store is not None
        return await scan(self.store, owner_id, filters)

    async def health_check(self) -> dict[str, Any]:
        if self.store is None:
            self._setup()
        assert self.store is not None
        return await self.store.health_check()

    async def close(self) -> None:
        if self.store is not None:
            await self.store.close()

    def dashboard_stats_sync(self, owner_id: int, now: datetime | None = None) -> DashboardStats:
        """Synchronous wrapper around :meth:`dashboard_stats`."""
        return asyncio.run(self.dashboard_stats(owner_id, now))

    def financial_report_sync(
        self,
        owner_id: int,
        start_date: date | datetime,
        end_date: date | datetime,
        outlet_id: int | None = None,
    ) -> FinancialReport:
        """Synchronous wrapper around :meth:`financial_report`."""
        return asyncio.run(self.financial_report(owner_id, start_date, end_date, outlet_id))
