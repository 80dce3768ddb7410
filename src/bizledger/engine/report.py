"""
Financial Report Generator — income statement over a date range.

Totals, net profit, profit margin and per-category breakdowns. Margin and
expense shares are defined as 0 when their denominator is 0.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING

from bizledger.config import EngineConfig
from bizledger.engine.ledger import ZERO, bucket_by_category
from bizledger.models.financial import Transaction, TransactionFilters
from bizledger.models.report import CategoryAmount, ExpenseCategoryAmount, FinancialReport

if TYPE_CHECKING:
    from bizledger.store.base import BaseTransactionStore

logger = logging.getLogger("bizledger.engine.report")

HUNDRED = Decimal(100)


class FinancialReportGenerator:
    """Compute :class:`FinancialReport` from a transaction store."""

    def __init__(self, store: BaseTransactionStore, config: EngineConfig | None = None) -> None:
        self.store = store
        self.config = config or EngineConfig()

    async def generate(
        self,
        owner_id: int,
        start_date: date | datetime,
        end_date: date | datetime,
        outlet_id: int | None = None,
    ) -> FinancialReport:
        """Build the report for ``[start_date, end_date]``.

        A plain ``date`` as ``end_date`` covers that whole day. The range is
        used as given; a start after the end simply matches nothing.

        Args:
            owner_id: Ledger owner.
            start_date: Inclusive lower bound.
            end_date: Inclusive upper bound.
            outlet_id: ``None`` for every transaction, 0 for head-office
                transactions only, otherwise a single outlet.
        """
        start = _as_start(start_date)
        end = _as_end(end_date)
        filters = TransactionFilters(start_date=start, end_date=end, outlet_id=outlet_id)
        page = await self.store.query_transactions(owner_id, filters)

        report = build_report(page.transactions, start, end, outlet_id=outlet_id, config=self.config)
        logger.info(
            "Report for owner %s (%s to %s): %d transactions",
            owner_id,
            start.date(),
            end.date(),
            len(page.transactions),
        )
        return report


def build_report(
    transactions: list[Transaction],
    start_date: datetime,
    end_date: datetime,
    *,
    outlet_id: int | None = None,
    config: EngineConfig | None = None,
) -> FinancialReport:
    """Pure fold behind :meth:`FinancialReportGenerator.generate`."""
    config = config or EngineConfig()
    buckets = bucket_by_category(transactions, config.uncategorized_label)
    total_income = buckets.totals.income
    total_expenses = buckets.totals.expenses
    net_profit = total_income - total_expenses

    income_items = _ordered(buckets.income, config.category_order)
    expense_items = _ordered(buckets.expenses, config.category_order)

    return FinancialReport(
        start_date=start_date,
        end_date=end_date,
        outlet_id=outlet_id,
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=net_profit,
        profit_margin=_share(net_profit, total_income),
        income_by_category=[CategoryAmount(category=name, amount=amount) for name, amount in income_items],
        expenses_by_category=[
            ExpenseCategoryAmount(
                category=name,
                amount=amount,
                percentage=_share(amount, total_expenses),
            )
            for name, amount in expense_items
        ],
    )


def _share(part: Decimal, whole: Decimal) -> Decimal:
    # Non-positive denominators yield 0.
    if whole > ZERO:
        return part / whole * HUNDRED
    return ZERO


def _ordered(sums: dict[str, Decimal], order: str) -> list[tuple[str, Decimal]]:
    items = list(sums.items())
    if order == "amount":
        # Stable sort: equal amounts keep first-seen order.
        items.sort(key=lambda item: item[1], reverse=True)
    return items


def _as_start(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _as_end(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max)
