"""
Ovo CLI - Command line interface for the farm dashboard.
"""

import json
from datetime import date
from typing import Optional

import typer
from rich.columns import Columns
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ovo.config import Settings, load_settings
from ovo.dashboard import DashboardView, build_dashboard
from ovo.dashboard.formatting import (
    color_for,
    day_label,
    format_count,
    format_currency,
    format_percent,
)
from ovo.logging_config import configure_logging
from ovo.store.base import RecordKind
from ovo.store.errors import OvoError
from ovo.store.manager import StoreManager
from ovo.store.parsing import parse_record, record_to_dict

app = typer.Typer(
    name="ovo",
    help="Poultry farm dashboard - track expenses, egg production and sales",
    add_completion=False,
)
console = Console()

OWNER_OPTION = typer.Option("default", "--owner", "-o", help="Owner whose records to use")


def get_settings(data_path: Optional[str] = None, backend: Optional[str] = None) -> Settings:
    try:
        settings = load_settings(data_path=data_path, backend=backend)
    except OvoError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    configure_logging(settings.log_level)
    return settings


def open_store(settings: Settings) -> StoreManager:
    manager = StoreManager(settings)
    try:
        manager.init()
    except OvoError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    return manager


def add_record(kind: RecordKind, owner: str, data: dict, data_path: Optional[str]) -> None:
    settings = get_settings(data_path)

    record = parse_record(kind, data, owner)
    if record is None:
        console.print(f"[red]Invalid date: {escape(str(data.get('date')))}[/red]")
        raise typer.Exit(code=1)

    manager = open_store(settings)
    try:
        stored = manager.store.add(record)
    except OvoError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    finally:
        manager.reset()

    console.print(f"[green]Added {kind.value} record[/green] [cyan]{escape(stored.id)}[/cyan]")


def render_dashboard(view: DashboardView, locale: str) -> None:
    summary = view.summary
    profit_color = "green" if summary.is_profitable else "red"

    cards = [
        Panel(
            f"[bold {profit_color}]{format_currency(summary.net_profit, locale)}[/]\n"
            f"[{profit_color}]{format_percent(summary.margin_percent, locale)} margin[/]",
            title="Net Profit",
        ),
        Panel(
            f"[bold green]{format_currency(summary.total_revenue, locale)}[/]",
            title="Sales Revenue",
        ),
        Panel(
            f"[bold red]{format_currency(summary.total_expenses, locale)}[/]",
            title="Expenses",
        ),
        Panel(
            f"[bold yellow]{format_count(summary.total_eggs, locale)}[/]",
            title="Eggs Produced",
        ),
    ]
    console.print(Columns(cards, equal=True, expand=True))
    console.print()

    if view.trend:
        table = Table(title="Trend: Production vs Sales")
        table.add_column("Day", style="cyan")
        table.add_column("Eggs", justify="right", style="yellow")
        table.add_column("Revenue", justify="right", style="green")
        for point in view.trend:
            table.add_row(
                day_label(point.date_key),
                format_count(point.eggs_produced, locale),
                format_currency(point.revenue, locale),
            )
        console.print(table)
    else:
        console.print("[dim]Not enough data for the trend chart[/dim]")
    console.print()

    if view.categories:
        total = sum(c.total_cost for c in view.categories)
        table = Table(title="Cost Distribution")
        table.add_column("")
        table.add_column("Category")
        table.add_column("Cost", justify="right")
        table.add_column("Share", justify="right")
        for index, share in enumerate(view.categories):
            percent = share.total_cost / total * 100 if total > 0 else 0
            table.add_row(
                f"[{color_for(index)}]■[/]",
                share.category.value,
                format_currency(share.total_cost, locale),
                format_percent(percent, locale),
            )
        console.print(table)
    else:
        console.print("[dim]No expense data[/dim]")


@app.command()
def dashboard(
    owner: str = OWNER_OPTION,
    window: Optional[int] = typer.Option(None, "--window", "-w", help="Days shown in the trend"),
    data_path: Optional[str] = typer.Option(None, "--data", help="Data file (json backend)"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show summary metrics, daily trend and cost distribution."""
    settings = get_settings(data_path)
    manager = open_store(settings)
    try:
        snapshot = manager.store.snapshot(owner)
    finally:
        manager.reset()

    if window is None:
        window = settings.trend_window
    if window <= 0:
        console.print("[red]--window must be positive[/red]")
        raise typer.Exit(code=1)

    view = build_dashboard(snapshot, window)

    if json_output:
        typer.echo(json.dumps(view.to_dict(), indent=2))
        return

    console.print(Panel.fit(f"[bold]Farm dashboard[/bold] - [cyan]{escape(owner)}[/cyan]", border_style="green"))
    render_dashboard(view, settings.locale)


@app.command("add-expense")
def add_expense(
    cost: str = typer.Argument(..., help="Amount spent"),
    category: str = typer.Option("Other", "--category", "-c", help="Feed, Medicine or Other"),
    description: str = typer.Option("", "--description", "-d"),
    day: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    owner: str = OWNER_OPTION,
    data_path: Optional[str] = typer.Option(None, "--data"),
):
    """Record an expense."""
    add_record(
        RecordKind.EXPENSE,
        owner,
        {
            "category": category,
            "description": description,
            "cost": cost,
            "date": day or date.today().isoformat(),
        },
        data_path,
    )


@app.command("add-production")
def add_production(
    eggs: str = typer.Argument(..., help="Eggs collected"),
    feed_kg: str = typer.Option("0", "--feed", "-f", help="Feed consumed in kg"),
    day: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    owner: str = OWNER_OPTION,
    data_path: Optional[str] = typer.Option(None, "--data"),
):
    """Record a day's egg production."""
    add_record(
        RecordKind.PRODUCTION,
        owner,
        {
            "eggs_produced": eggs,
            "feed_consumed_kg": feed_kg,
            "date": day or date.today().isoformat(),
        },
        data_path,
    )


@app.command("add-sale")
def add_sale(
    quantity: str = typer.Argument(..., help="Eggs sold"),
    value: str = typer.Argument(..., help="Amount received"),
    client: Optional[str] = typer.Option(None, "--client"),
    day: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    owner: str = OWNER_OPTION,
    data_path: Optional[str] = typer.Option(None, "--data"),
):
    """Record a sale."""
    add_record(
        RecordKind.SALE,
        owner,
        {
            "quantity": quantity,
            "value": value,
            "client": client,
            "date": day or date.today().isoformat(),
        },
        data_path,
    )


@app.command()
def delete(
    kind: RecordKind = typer.Argument(..., help="expenses, production or sales"),
    record_id: str = typer.Argument(...),
    owner: str = OWNER_OPTION,
    data_path: Optional[str] = typer.Option(None, "--data"),
):
    """Delete a record by id."""
    settings = get_settings(data_path)
    manager = open_store(settings)
    try:
        manager.store.delete(owner, kind, record_id)
    except OvoError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    finally:
        manager.reset()

    console.print(f"[green]Deleted {kind.value} record[/green] [cyan]{escape(record_id)}[/cyan]")


@app.command("list")
def list_records(
    kind: RecordKind = typer.Argument(..., help="expenses, production or sales"),
    owner: str = OWNER_OPTION,
    data_path: Optional[str] = typer.Option(None, "--data"),
    json_output: bool = typer.Option(False, "--json", "-j"),
):
    """List records of one kind, newest first."""
    settings = get_settings(data_path)
    manager = open_store(settings)
    try:
        records = manager.store.list_records(owner, kind)
    finally:
        manager.reset()

    rows = [record_to_dict(r) for r in records]

    if json_output:
        typer.echo(json.dumps(rows, indent=2, ensure_ascii=False))
        return

    if not rows:
        console.print(f"[dim]No {kind.value} records[/dim]")
        return

    table = Table(title=kind.value.capitalize())
    for column in rows[0]:
        table.add_column(column, style="cyan" if column == "id" else None)
    for row in rows:
        table.add_row(*["" if v is None else escape(str(v)) for v in row.values()])
    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
