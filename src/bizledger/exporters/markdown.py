"""
Markdown report exporter.

Generates a Markdown income statement from a FinancialReport,
suitable for GitHub, Notion, or any Markdown viewer.
"""

from __future__ import annotations

from decimal import Decimal

from bizledger.models.report import FinancialReport


def _money(value: Decimal, currency: str) -> str:
    return f"{currency} {value:,.2f}"


def render_markdown(report: FinancialReport, currency: str = "IDR") -> str:
    """Render a FinancialReport as Markdown."""
    lines: list[str] = []

    # Header
    lines.append("# Financial Report")
    lines.append("")
    lines.append(f"*Period: {report.start_date:%Y-%m-%d} to {report.end_date:%Y-%m-%d}*")
    if report.outlet_id == 0:
        lines.append("*Outlet: head office*")
    elif report.outlet_id is not None:
        lines.append(f"*Outlet: #{report.outlet_id}*")
    lines.append("")

    # Summary
    lines.append("## Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Total Income** | {_money(report.total_income, currency)} |")
    lines.append(f"| **Total Expenses** | {_money(report.total_expenses, currency)} |")
    lines.append(f"| **Net Profit** | {_money(report.net_profit, currency)} |")
    lines.append(f"| **Profit Margin** | {report.profit_margin:.2f}% |")
    lines.append("")

    lines.append("## Income by Category")
    lines.append("")
    if report.income_by_category:
        lines.append("| Category | Amount |")
        lines.append("|----------|--------|")
        for item in report.income_by_category:
            lines.append(f"| {item.category} | {_money(item.amount, currency)} |")
    else:
        lines.append("*No income in this period.*")
    lines.append("")

    lines.append("## Expenses by Category")
    lines.append("")
    if report.expenses_by_category:
        lines.append("| Category | Amount | Share |")
        lines.append("|----------|--------|-------|")
        for item in report.expenses_by_category:
            lines.append(f"| {item.category} | {_money(item.amount, currency)} | {item.percentage:.1f}% |")
    else:
        lines.append("*No expenses in this period.*")
    lines.append("")

    lines.append("---")
    lines.append("*Generated by BizLedger*")
    lines.append("")

    return "\n".join(lines)
