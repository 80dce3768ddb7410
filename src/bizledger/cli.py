"""
BizLedger CLI — command-line interface.

Usage:
    bizledger dashboard --user 1 --config bizledger.yaml
    bizledger report --user 1 --start 2025-01-01 --end 2025-01-31 -o report.md
    bizledger transactions --user 1 --search kopi --page 2
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from bizledger import __version__

app = typer.Typer(
    name="bizledger",
    help="BizLedger — cash balance, cash flow and financial reports for small businesses",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]BizLedger[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level: DEBUG, INFO, WARNING, ERROR",
    ),
) -> None:
    """BizLedger — know where your cash is."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load_ledger(config: str, database_url: str | None):  # noqa: ANN202
    from bizledger.service import BizLedger

    config_path = config if Path(config).exists() else None
    overrides = {}
    if database_url:
        overrides["store"] = {"type": "sql", "url": database_url}
    return BizLedger.from_config(config_path, **overrides)


def _parse_day(value: str, option: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        console.print(f"[red]Error: {option} must be a YYYY-MM-DD date[/red]")
        raise typer.Exit(1)


@app.command()
def dashboard(
    user: int = typer.Option(..., "--user", "-u", help="Owner id"),
    config: str = typer.Option("bizledger.yaml", "--config", "-c", help="Path to config file"),
    database_url: str = typer.Option(None, "--database-url", help="SQLAlchemy database URL"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show the dashboard snapshot: balance, weekly figures, cash flow."""
    ledger = _load_ledger(config, database_url)
    stats = asyncio.run(ledger.dashboard_stats(user))

    if as_json:
        console.print_json(stats.to_json())
        return

    currency = ledger.config.currency
    console.print(Panel.fit("[bold blue]BizLedger[/bold blue] — Dashboard", subtitle=f"v{__version__}"))

    table = Table(title="This Week", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Cash Balance", f"{currency} {stats.cash_balance:,.2f}")
    table.add_row("Weekly Income", f"{currency} {stats.weekly_income:,.2f}")
    table.add_row("Weekly Expenses", f"{currency} {stats.weekly_expenses:,.2f}")
    table.add_row("Weekly Profit", f"{currency} {stats.weekly_profit:,.2f}")
    console.print(table)

    flow = Table(title="Cash Flow (7 days)")
    flow.add_column("Day")
    flow.add_column("Balance", justify="right")
    for point in stats.cash_flow_data:
        flow.add_row(f"{point.date:%a %d %b}", f"{point.balance:,.2f}")
    console.print(flow)

    if stats.recent_transactions:
        _print_transactions(stats.recent_transactions, "Recent Transactions")


@app.command()
def report(
    user: int = typer.Option(..., "--user", "-u", help="Owner id"),
    start: str = typer.Option(..., "--start", help="First day, YYYY-MM-DD"),
    end: str = typer.Option(..., "--end", help="Last day (inclusive), YYYY-MM-DD"),
    outlet: int = typer.Option(None, "--outlet", min=0, help="Outlet id, 0 for head office only"),
    config: str = typer.Option("bizledger.yaml", "--config", "-c", help="Path to config file"),
    database_url: str = typer.Option(None, "--database-url", help="SQLAlchemy database URL"),
    output: str = typer.Option(None, "--output", "-o", help="Output file path (.md, .json)"),
) -> None:
    """Generate a financial report for a date range."""
    start_day = _parse_day(start, "--start").date()
    end_day = _parse_day(end, "--end").date()

    ledger = _load_ledger(config, database_url)
    result = asyncio.run(ledger.financial_report(user, start_day, end_day, outlet_id=outlet))
    currency = ledger.config.currency

    table = Table(title=f"Financial Report {start_day} — {end_day}", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total Income", f"{currency} {result.total_income:,.2f}")
    table.add_row("Total Expenses", f"{currency} {result.total_expenses:,.2f}")
    table.add_row("Net Profit", f"{currency} {result.net_profit:,.2f}")
    table.add_row("Profit Margin", f"{result.profit_margin:.2f}%")
    console.print(table)

    if result.expenses_by_category:
        expenses = Table(title="Expenses by Category")
        expenses.add_column("Category", style="bold cyan")
        expenses.add_column("Amount", justify="right")
        expenses.add_column("Share", justify="right")
        for item in result.expenses_by_category:
            expenses.add_row(item.category, f"{item.amount:,.2f}", f"{item.percentage:.1f}%")
        console.print(expenses)

    if output:
        path = Path(output)
        content = result.to_json() if path.suffix == ".json" else result.to_markdown(currency)
        path.write_text(content)
        console.print(f"[green]✓[/green] Report saved to [bold]{path}[/bold]")


@app.command()
def transactions(
    user: int = typer.Option(..., "--user", "-u", help="Owner id"),
    start: str = typer.Option(None, "--start", help="First day, YYYY-MM-DD"),
    end: str = typer.Option(None, "--end", help="Last day (inclusive), YYYY-MM-DD"),
    category: int = typer.Option(None, "--category", help="Category id"),
    kind: str = typer.Option(None, "--type", help="income or expense"),
    search: str = typer.Option(None, "--search", "-s", help="Case-insensitive text in description"),
    outlet: int = typer.Option(None, "--outlet", min=0, help="Outlet id, 0 for head office only"),
    page: int = typer.Option(1, "--page", min=1),
    limit: int = typer.Option(10, "--limit", min=1),
    config: str = typer.Option("bizledger.yaml", "--config", "-c", help="Path to config file"),
    database_url: str = typer.Option(None, "--database-url", help="SQLAlchemy database URL"),
) -> None:
    """List transactions, newest first."""
    from bizledger.models.financial import TransactionFilters, TransactionType

    try:
        txn_type = TransactionType(kind.lower()) if kind else None
    except ValueError:
        console.print("[red]Error: --type must be 'income' or 'expense'[/red]")
        raise typer.Exit(1)

    filters = TransactionFilters(
        start_date=_parse_day(start, "--start") if start else None,
        end_date=_parse_day(end, "--end").replace(hour=23, minute=59, second=59, microsecond=999999) if end else None,
        category_id=category,
        type=txn_type,
        search=search,
        outlet_id=outlet,
        limit=limit,
        offset=(page - 1) * limit,
    )

    ledger = _load_ledger(config, database_url)
    result = asyncio.run(ledger.list_transactions(user, filters))

    _print_transactions(result.transactions, f"Transactions (page {result.page} of {max(result.pages, 1)})")
    console.print(f"[dim]{result.total} matching transaction(s)[/dim]")


@app.command()
def check(
    config: str = typer.Option("bizledger.yaml", "--config", "-c", help="Path to config file"),
    database_url: str = typer.Option(None, "--database-url", help="SQLAlchemy database URL"),
) -> None:
    """Check that the configured store is reachable."""
    ledger = _load_ledger(config, database_url)
    health = asyncio.run(ledger.health_check())

    if health["healthy"]:
        console.print(f"[green]✓[/green] {health['store']} store is healthy")
    else:
        console.print(f"[red]✗[/red] {health['store']} store is unavailable: {health['error']}")
        raise typer.Exit(1)


@app.command()
def serve(
    config: str = typer.Option("bizledger.yaml", "--config", "-c", help="Path to config file"),
    database_url: str = typer.Option(None, "--database-url", help="SQLAlchemy database URL"),
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", help="Bind port (default from config)"),
) -> None:
    """Serve the HTTP API."""
    import uvicorn

    from bizledger.api import create_app

    ledger = _load_ledger(config, database_url)
    api_config = ledger.config.api
    uvicorn.run(
        create_app(ledger),
        host=host or api_config.host,
        port=port or api_config.port,
        log_level=ledger.config.log_level.lower(),
    )


def _print_transactions(items, title: str) -> None:  # noqa: ANN001
    table = Table(title=title)
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Category", style="cyan")
    table.add_column("Amount", justify="right")

    for txn in items:
        color = "green" if txn.is_income else "red"
        sign = "+" if txn.is_income else "-"
        table.add_row(
            f"{txn.date:%Y-%m-%d}",
            txn.description,
            txn.category_name or "—",
            f"[{color}]{sign}{txn.amount:,.2f}[/{color}]",
        )

    console.print(table)


if __name__ == "__main__":
    app()
