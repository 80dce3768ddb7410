"""Models package — ledger entries and the views derived from them."""
from bizledger.models.financial import (
    Category,
    Transaction,
    TransactionFilters,
    TransactionPage,
    TransactionType,
)
from bizledger.models.report import (
    CashFlowPoint,
    CategoryAmount,
    DashboardStats,
    ExpenseCategoryAmount,
    FinancialReport,
)

__all__ = [
    "CashFlowPoint",
    "Category",
    "CategoryAmount",
    "DashboardStats",
    "ExpenseCategoryAmount",
    "FinancialReport",
    "Transaction",
    "TransactionFilters",
    "TransactionPage",
    "TransactionType",
]
