"""
Dashboard Stats Calculator — the always-on snapshot for one owner.

Produces:
1. **Cash balance** — signed sum over the whole ledger.
2. **Weekly figures** — income, expenses and profit since ``now - 7 days``.
3. **Recent transactions** — the newest five entries.
4. **Cash flow** — a running balance at the end of each of the last 7 days.

The cash-flow series starts from zero at the beginning of the window and
only carries the daily deltas forward, so it shows movement within the
week rather than the true historical balance. Set
``engine.cash_flow_anchor = "opening_balance"`` to start it from the
balance of everything dated before the trailing window instead.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from bizledger.config import EngineConfig
from bizledger.engine.ledger import (
    ZERO,
    bucket_by_day,
    day_start,
    fold_totals,
    running_balance,
)
from bizledger.models.financial import Transaction, TransactionFilters
from bizledger.models.report import CashFlowPoint, DashboardStats

if TYPE_CHECKING:
    from bizledger.store.base import BaseTransactionStore

logger = logging.getLogger("bizledger.engine.dashboard")


class DashboardCalculator:
    """Compute :class:`DashboardStats` from a transaction store.

    ``now`` is always passed in; the calculator never reads the clock.
    """

    def __init__(self, store: BaseTransactionStore, config: EngineConfig | None = None) -> None:
        self.store = store
        self.config = config or EngineConfig()

    async def compute(self, owner_id: int, now: datetime) -> DashboardStats:
        """Fetch the ledger and build the snapshot.

        The full-ledger read and the trailing-window read are independent
        and run concurrently.
        """
        window_start = now - timedelta(days=self.config.trailing_days)
        all_transactions, weekly_page = await asyncio.gather(
            self.store.query_all_transactions(owner_id),
            self.store.query_transactions(owner_id, TransactionFilters(start_date=window_start)),
        )
        stats = build_dashboard(all_transactions, weekly_page.transactions, now, self.config)
        logger.info(
            "Dashboard for owner %s: %d transactions, %d in window",
            owner_id,
            len(all_transactions),
            len(weekly_page.transactions),
        )
        return stats


def build_dashboard(
    all_transactions: list[Transaction],
    window_transactions: list[Transaction],
    now: datetime,
    config: EngineConfig | None = None,
) -> DashboardStats:
    """Pure fold behind :meth:`DashboardCalculator.compute`."""
    config = config or EngineConfig()

    weekly = fold_totals(window_transactions)

    recent = sorted(all_transactions, key=lambda t: (t.date, t.id), reverse=True)
    recent = recent[: config.recent_limit]

    return DashboardStats(
        cash_balance=running_balance(all_transactions),
        weekly_income=weekly.income,
        weekly_expenses=weekly.expenses,
        weekly_profit=weekly.net,
        recent_transactions=recent,
        cash_flow_data=cash_flow_series(all_transactions, now, config),
    )


def cash_flow_series(
    transactions: list[Transaction],
    now: datetime,
    config: EngineConfig | None = None,
) -> list[CashFlowPoint]:
    """Running end-of-day balance for the ``cash_flow_days`` days ending today."""
    config = config or EngineConfig()
    tz = now.tzinfo
    days = [(now - timedelta(days=i)).date() for i in range(config.cash_flow_days - 1, -1, -1)]

    balance = ZERO
    if config.cash_flow_anchor == "opening_balance":
        window_start = now - timedelta(days=config.trailing_days)
        balance = running_balance(t for t in transactions if t.date < window_start)

    deltas = bucket_by_day(transactions, days, tz)
    points: list[CashFlowPoint] = []
    for day in days:
        balance += deltas[day]
        points.append(CashFlowPoint(date=day_start(day, tz), balance=balance))
    return points
