"""CLI for GroupSplit using Typer."""

import logging
import sys
from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .loader import load_ledger
from .models import MonthlySummary, PaidTotal, PersonBalance, Split
from .service import LedgerService
from .summary import month_key, person_paid_totals
from .ui import select_person_interactive

app = typer.Typer(
    name="groupsplit",
    help="Split shared expenses and see who owes whom",
)

console = Console()

FileOption = typer.Option(
    None, "--file", "-f", help="Ledger JSON file (defaults to GROUPSPLIT_LEDGER_PATH)"
)
VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose output")


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def open_service(ledger_file: Path | None) -> tuple[Settings, LedgerService]:
    """Load settings and the ledger document into a service."""
    settings = load_settings()
    ledger = load_ledger(ledger_file or settings.ledger_path)
    return settings, LedgerService(settings, ledger)


def format_money(amount: Decimal, symbol: str = "$", use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            return f"({symbol}[red]{abs_amount:,.2f}[/red])"
        return f"({symbol}{abs_amount:,.2f})"
    if use_color:
        return f" [green]{symbol}{abs_amount:,.2f}[/green] "
    return f" {symbol}{abs_amount:,.2f} "


@app.command()
def balances(
    ledger_file: Path | None = FileOption,
    person: str | None = typer.Option(
        None, "--person", "-p", help="Only show this person's balances"
    ),
    pick: bool = typer.Option(
        False, "--pick", help="Choose the person interactively"
    ),
    verbose: bool = VerboseOption,
):
    """
    Show who owes whom.

    Positive amounts are owed to the person, negative amounts are owed by them.
    """
    setup_logging(verbose)

    try:
        settings, service = open_service(ledger_file)

        if pick:
            person = select_person_interactive(service.people)

        rows = service.balances
        if person:
            rows = [b for b in rows if b.person_id == person]
            if not rows:
                console.print(
                    f"[green]{service.person_name(person)} is settled up.[/green]"
                )
                return

        if not rows:
            console.print("[green]Everyone is settled up.[/green]")
            return

        display_balances(service, rows, settings.currency_symbol)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


def display_balances(
    service: LedgerService, rows: list[PersonBalance], symbol: str = "$"
):
    """Display person balances in a table, sorted by name."""
    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Person", style="cyan")
    table.add_column("Net", justify="right")
    table.add_column("Is owed by", no_wrap=False)
    table.add_column("Owes", no_wrap=False)

    for row in sorted(rows, key=lambda b: service.person_name(b.person_id).lower()):
        owed_by = "\n".join(
            f"{service.person_name(b.person_id)}: {format_money(b.amount, symbol)}"
            for b in row.owed_by()
        )
        owes = "\n".join(
            f"{service.person_name(b.person_id)}: {format_money(-b.amount, symbol)}"
            for b in row.owes_to()
        )
        table.add_row(
            service.person_name(row.person_id),
            format_money(row.total_balance, symbol),
            owed_by or "[dim]—[/dim]",
            owes or "[dim]—[/dim]",
        )

    console.print(table)

    # Verification
    net = sum((row.total_balance for row in service.balances), Decimal("0"))
    if net == 0:
        console.print("  [green]✓ Balances sum to zero[/green]")
    else:
        console.print(f"  [red]✗ Balances sum to {net}[/red]")


@app.command()
def splits(
    expense_id: str = typer.Argument(..., help="Expense ID"),
    ledger_file: Path | None = FileOption,
    verbose: bool = VerboseOption,
):
    """Show each participant's share of one expense."""
    setup_logging(verbose)

    try:
        settings, service = open_service(ledger_file)
        expense = service.get_expense(expense_id)
        display_splits(
            service,
            expense.description,
            expense.paid_by,
            service.splits_for(expense_id),
            settings.currency_symbol,
        )

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


def display_splits(
    service: LedgerService,
    description: str,
    paid_by: str,
    split_lines: list[Split],
    symbol: str = "$",
):
    """Display the shares of one expense."""
    console.print(f"\n[bold]{description}[/bold]")
    console.print(f"  Paid by: {service.person_name(paid_by)}\n")

    table = Table(title="Shares", show_header=True, header_style="bold magenta")
    table.add_column("Participant", style="cyan")
    table.add_column("Share", justify="right")
    table.add_column("Owes payer", justify="center")

    for line in split_lines:
        table.add_row(
            service.person_name(line.participant_id),
            format_money(line.amount, symbol),
            "—" if line.participant_id == paid_by else "✓",
        )

    console.print(table)
    total = sum((line.amount for line in split_lines), Decimal("0"))
    console.print(f"  Total charged: {format_money(total, symbol)}")


@app.command()
def summary(
    month: str | None = typer.Option(
        None, "--month", "-m", help="Only show this month (YYYY-MM)"
    ),
    ledger_file: Path | None = FileOption,
    verbose: bool = VerboseOption,
):
    """Show spending totals per month and category."""
    setup_logging(verbose)

    try:
        settings, service = open_service(ledger_file)
        summaries = service.monthly_summaries()
        if month:
            summaries = [s for s in summaries if s.month == month]

        if not summaries:
            console.print("[yellow]No expenses found.[/yellow]")
            return

        for monthly in summaries:
            display_summary(monthly, settings.currency_symbol)

        expenses = service.expenses
        if month:
            expenses = [e for e in expenses if month_key(e) == month]
        display_paid_totals(
            service, person_paid_totals(expenses), settings.currency_symbol
        )

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


def display_summary(monthly: MonthlySummary, symbol: str = "$"):
    """Display one month's totals with a per-category breakdown."""
    table = Table(
        title=f"{monthly.month} ({monthly.expense_count} expenses)",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Category", style="cyan")
    table.add_column("Base", justify="right")
    table.add_column("Tax", justify="right")
    table.add_column("Total", justify="right")

    for category in monthly.categories:
        table.add_row(
            category.category,
            format_money(category.base, symbol),
            format_money(category.tax, symbol),
            format_money(category.total, symbol),
        )
    table.add_row(
        "[bold]All[/bold]",
        format_money(monthly.base_amount, symbol),
        format_money(monthly.tax_amount, symbol),
        format_money(monthly.total_amount, symbol),
    )

    console.print(table)


def display_paid_totals(
    service: LedgerService, totals: list[PaidTotal], symbol: str = "$"
):
    """Display how much each person has paid out."""
    table = Table(title="Paid", show_header=True, header_style="bold magenta")
    table.add_column("Person", style="cyan")
    table.add_column("Base", justify="right")
    table.add_column("Tax", justify="right")
    table.add_column("Total", justify="right")

    for paid in sorted(totals, key=lambda p: p.total, reverse=True):
        table.add_row(
            service.person_name(paid.person_id),
            format_money(paid.base, symbol),
            format_money(paid.tax, symbol),
            format_money(paid.total, symbol),
        )

    console.print(table)


@app.command()
def check(
    ledger_file: Path | None = FileOption,
    verbose: bool = VerboseOption,
):
    """Validate every expense against the current engine settings."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        ledger = load_ledger(ledger_file or settings.ledger_path)
        # Skip invalid expenses while loading so every problem gets reported
        lenient = settings.model_copy(update={"skip_invalid_expenses": True})
        service = LedgerService(lenient, ledger)
        problems = service.invalid_expenses()

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)

    if not problems:
        console.print(
            f"[green]✓ All {len(service.expenses)} expenses are valid[/green]"
        )
        return

    for expense, error in problems:
        console.print(f"[red]✗[/red] {expense.id} ({expense.description}): {error}")
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
