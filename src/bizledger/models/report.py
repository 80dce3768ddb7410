"""
Derived views — dashboard snapshot and date-bounded financial report.

Both are recomputed on every request and never persisted.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import Field

from bizledger.models.financial import CamelModel, Money, Percentage, Transaction


class CashFlowPoint(CamelModel):
    """Running balance at the end of one calendar day."""

    date: datetime
    balance: Money


class DashboardStats(CamelModel):
    """Always-on dashboard snapshot for one owner."""

    cash_balance: Money = Decimal(0)
    weekly_income: Money = Decimal(0)
    weekly_expenses: Money = Decimal(0)
    weekly_profit: Money = Decimal(0)
    recent_transactions: list[Transaction] = Field(default_factory=list)
    cash_flow_data: list[CashFlowPoint] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dictionary with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class CategoryAmount(CamelModel):
    """Sum of one category's income."""

    category: str
    amount: Money


class ExpenseCategoryAmount(CamelModel):
    """Sum of one category's expenses and its share of total expenses."""

    category: str
    amount: Money
    percentage: Percentage = Decimal(0)


class FinancialReport(CamelModel):
    """Income statement for an owner over ``[start_date, end_date]``.

    Can be exported to JSON or Markdown.
    """

    start_date: datetime
    end_date: datetime
    outlet_id: int | None = None
    total_income: Money = Decimal(0)
    total_expenses: Money = Decimal(0)
    net_profit: Money = Decimal(0)
    profit_margin: Percentage = Decimal(0)
    income_by_category: list[CategoryAmount] = Field(default_factory=list)
    expenses_by_category: list[ExpenseCategoryAmount] = Field(default_factory=list)

    def to_markdown(self, currency: str = "IDR") -> str:
        """Export report as Markdown."""
        from bizledger.exporters.markdown import render_markdown

        return render_markdown(self, currency=currency)

    def to_json(self) -> str:
        """Export report as JSON."""
        return self.model_dump_json(by_alias=True, indent=2, exclude_none=True)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dictionary with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
