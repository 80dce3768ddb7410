"""
BizLedger — financial aggregation for small-business ledgers.

Cash balance, weekly figures, daily cash flow and category reports,
computed on demand from the transactions you already record.
"""

__version__ = "0.3.0"
__all__ = ["BizLedger"]

from bizledger.service import BizLedger  # noqa: E402
