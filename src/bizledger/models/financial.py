"""
Ledger data models — transactions, categories, query filters.
"""

from __future__ import annotations

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

CENTS = Decimal("0.01")


def _to_json_number(value: Decimal) -> float:
    return float(value.quantize(CENTS, rounding=ROUND_HALF_UP))


# Exact in memory, rounded to cents only when rendered as JSON.
Money = Annotated[Decimal, PlainSerializer(_to_json_number, return_type=float, when_used="json")]
Percentage = Money


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionType(str, Enum):
    """Direction of a ledger entry."""

    INCOME = "income"
    EXPENSE = "expense"


class Category(CamelModel):
    """A user-defined label for transactions."""

    id: int
    name: str
    type: TransactionType
    user_id: int


class Transaction(CamelModel):
    """A single ledger entry, joined with its category name when read from a store."""

    id: int
    user_id: int
    category_id: int | None = None
    outlet_id: int | None = None
    amount: Money
    type: TransactionType
    date: datetime
    description: str = ""
    notes: str | None = None
    category_name: str | None = None

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


class TransactionFilters(BaseModel):
    """Optional constraints for a transaction query.

    Date bounds are inclusive. ``outlet_id`` of 0 selects head-office
    transactions (those without an outlet); ``None`` disables the filter.
    A ``limit`` of ``None`` returns every match.
    """

    start_date: datetime | None = None
    end_date: datetime | None = None
    category_id: int | None = None
    type: TransactionType | None = None
    search: str | None = None
    outlet_id: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)


class TransactionPage(CamelModel):
    """One page of query results plus the unpaginated match count."""

    transactions: list[Transaction] = Field(default_factory=list)
    total: int = 0
    limit: int | None = Field(default=None, exclude=True)
    offset: int = Field(default=0, exclude=True)

    @property
    def page(self) -> int:
        """1-based page number of this slice."""
        if not self.limit:
            return 1
        return self.offset // self.limit + 1

    @property
    def pages(self) -> int:
        """Number of pages needed to show every match."""
        if not self.limit:
            return 1 if self.total else 0
        return math.ceil(self.total / self.limit)
