"""Engine package — folds that turn a ledger into dashboard and report views."""
from bizledger.engine.dashboard import DashboardCalculator, build_dashboard, cash_flow_series
from bizledger.engine.ledger import (
    CategoryBuckets,
    LedgerTotals,
    bucket_by_category,
    bucket_by_day,
    fold_totals,
    running_balance,
    scan,
    signed_amount,
)
from bizledger.engine.report import FinancialReportGenerator, build_report

__all__ = [
    "CategoryBuckets",
    "DashboardCalculator",
    "FinancialReportGenerator",
    "LedgerTotals",
    "bucket_by_category",
    "bucket_by_day",
    "build_dashboard",
    "build_report",
    "cash_flow_series",
    "fold_totals",
    "running_balance",
    "scan",
    "signed_amount",
]
