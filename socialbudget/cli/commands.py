"""SocialBudget CLI: inspect budgets and submit shared expenses."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from socialbudget.dashboard.controller import BudgetDashboard
from socialbudget.errors import LoadError
from socialbudget.formatting import attendee_label, format_currency
from socialbudget.logging_config import setup_logging
from socialbudget.modules.api.client import SocialBudgetClient
from socialbudget.modules.attendees.models import PersonSuggestion, TeamSuggestion
from socialbudget.modules.budgets.models import FiscalPeriod
from socialbudget.modules.expenses.models import ReceiptFile
from socialbudget.modules.expenses.splitter import split_cost

app = typer.Typer(help="SocialBudget — team expenses and quarterly budgets", no_args_is_help=True)
console = Console()

_options: dict[str, Optional[str]] = {"api_url": None}


def _async_run(coro):
    """Run an async coroutine."""
    return asyncio.run(coro)


def _make_client() -> SocialBudgetClient:
    return SocialBudgetClient(base_url=_options["api_url"])


@app.callback()
def main(
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Budget API base URL (overrides API_BASE_URL)"),
) -> None:
    """Configure logging and the API endpoint for every command."""
    setup_logging()
    _options["api_url"] = api_url


async def _load_dashboard(
    client: SocialBudgetClient,
    year: Optional[int],
    quarter: Optional[int],
) -> BudgetDashboard:
    dashboard = BudgetDashboard(client)
    if year is not None or quarter is not None:
        current = dashboard.state.period
        dashboard.state.period = FiscalPeriod(
            year=year if year is not None else current.year,
            quarter=quarter if quarter is not None else current.quarter,
        )
    await dashboard.load()
    return dashboard


def _exit_on_error(dashboard: BudgetDashboard) -> None:
    if dashboard.state.error:
        console.print(f"[red]✗ {dashboard.state.error}[/red]")
        raise typer.Exit(1)


@app.command()
def employees() -> None:
    """List the employee roster."""
    async def _run():
        async with _make_client() as client:
            return await client.fetch_employees()

    try:
        roster = _async_run(_run())
    except LoadError as exc:
        console.print(f"[red]✗ {exc.message}[/red]")
        raise typer.Exit(1)

    if not roster:
        console.print("[yellow]No employees found.[/yellow]")
        return

    table = Table(title="Employees")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Team")
    table.add_column("Department")
    for employee in roster:
        table.add_row(employee.id, employee.name, employee.team, employee.department or "—")
    console.print(table)


@app.command()
def expenses(
    year: Optional[int] = typer.Option(None, "--year", "-y", min=1, help="Fiscal year (default: current)"),
    quarter: Optional[int] = typer.Option(None, "--quarter", "-q", min=1, max=4, help="Quarter 1-4"),
    details: bool = typer.Option(False, "--details", "-d", help="Show attendees for each expense"),
) -> None:
    """List expenses for a quarter."""
    async def _run():
        async with _make_client() as client:
            return await _load_dashboard(client, year, quarter)

    dashboard = _async_run(_run())
    _exit_on_error(dashboard)
    state = dashboard.state

    if not state.expenses:
        console.print(f"[yellow]No expenses for {state.period}.[/yellow]")
        return

    table = Table(title=f"Expenses — {state.period}")
    table.add_column("Date")
    table.add_column("Description", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Per person", justify="right")
    table.add_column("Teams")
    table.add_column("Receipt", style="dim")
    for expense in state.expenses:
        teams = dashboard.teams_impacted(expense)
        table.add_row(
            expense.date.isoformat(),
            expense.description,
            format_currency(expense.amount),
            format_currency(expense.cost_per_person),
            ", ".join(teams) if teams else "—",
            expense.receipt_url or "—",
        )
    console.print(table)

    if details:
        for expense in state.expenses:
            names = ", ".join(attendee_label(a) for a in expense.attendees)
            console.print(f"  [bold]{expense.description}[/bold] — Attendees: {names}")


@app.command()
def budgets(
    year: Optional[int] = typer.Option(None, "--year", "-y", min=1, help="Fiscal year (default: current)"),
    quarter: Optional[int] = typer.Option(None, "--quarter", "-q", min=1, max=4, help="Quarter 1-4"),
) -> None:
    """Show department and team budget consumption."""
    async def _run():
        async with _make_client() as client:
            return await _load_dashboard(client, year, quarter)

    dashboard = _async_run(_run())
    _exit_on_error(dashboard)
    rollup = dashboard.state.rollup
    period = dashboard.state.period

    departments = Table(title=f"Department totals — {period}")
    departments.add_column("Department", style="cyan")
    departments.add_column("Allocated", justify="right")
    departments.add_column("Spent", justify="right")
    departments.add_column("Remaining", justify="right")
    for dept in rollup.department_totals:
        departments.add_row(
            dept.department,
            format_currency(dept.allocated),
            format_currency(dept.spent),
            format_currency(dept.remaining),
        )
    if not rollup.department_totals:
        departments.add_row("No department data.", "", "", "")
    console.print(departments)

    teams = Table(title=f"Team budgets — {period}")
    teams.add_column("Team", style="cyan")
    teams.add_column("Department")
    teams.add_column("Headcount", justify="right")
    teams.add_column("Allocated", justify="right")
    teams.add_column("Spent", justify="right")
    teams.add_column("Remaining", justify="right")
    for team in rollup.team_totals:
        remaining = format_currency(team.remaining)
        if team.remaining is not None and team.remaining < 0:
            remaining = f"[red]{remaining}[/red]"
        teams.add_row(
            team.team,
            team.department or "—",
            str(team.headcount),
            format_currency(team.allocated),
            format_currency(team.spent),
            remaining,
        )
    if not rollup.team_totals:
        teams.add_row("No team budgets yet.", "", "", "", "", "")
    console.print(teams)


@app.command()
def split(
    amount: str = typer.Argument(..., help="Total amount"),
    attendees: int = typer.Argument(..., help="Number of attendees"),
) -> None:
    """Show the even cost per person."""
    console.print(f"Cost per person: {format_currency(split_cost(amount, attendees))}")


@app.command()
def submit(
    description: str = typer.Option(..., "--description", "-m", help="What the expense was for"),
    amount: str = typer.Option(..., "--amount", "-a", help="Total amount"),
    attendee: list[str] = typer.Option(
        [], "--attendee", "-p", help="Employee id or team name (repeatable)",
    ),
    date: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    receipt_file: Optional[Path] = typer.Option(
        None, "--receipt-file", "-f", exists=True, dir_okay=False, help="Receipt to upload",
    ),
    receipt_url: str = typer.Option("", "--receipt-url", "-u", help="Link to the receipt"),
) -> None:
    """Submit a shared expense."""
    async def _run():
        async with _make_client() as client:
            dashboard = await _load_dashboard(client, None, None)
            if dashboard.state.error:
                return dashboard, None

            roster = dashboard.state.roster
            for value in attendee:
                if value in roster:
                    dashboard.select_suggestion(PersonSuggestion(roster.by_id[value]))
                    continue
                team = roster.find_team(value)
                if team is None:
                    dashboard.state.error = f"Unknown attendee or team: {value}"
                    return dashboard, None
                dashboard.select_suggestion(TeamSuggestion(team))

            changes = {"description": description, "amount_raw": amount, "receipt_url": receipt_url}
            if date:
                changes["date"] = date
            dashboard.update_draft(**changes)
            if receipt_file is not None:
                dashboard.set_receipt_file(ReceiptFile.from_path(receipt_file))

            per_person = dashboard.cost_per_person
            expense = await dashboard.submit()
            dashboard.close()
            return dashboard, (expense, per_person)

    dashboard, outcome = _async_run(_run())
    if outcome is None or outcome[0] is None:
        _exit_on_error(dashboard)
        raise typer.Exit(1)

    expense, per_person = outcome
    console.print(f"[green]✓ {dashboard.state.toast or 'Expense submitted.'}[/green]")
    console.print(f"  ID: {expense.id}")
    console.print(f"  Amount: {format_currency(expense.amount)} "
                  f"({len(expense.attendees)} attendees, {format_currency(per_person)} each)")
    if dashboard.state.error:
        console.print(f"[yellow]⚠ Submitted, but refreshing budgets failed: {dashboard.state.error}[/yellow]")
