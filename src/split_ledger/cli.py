"""CLI for SplitLedger using Typer."""

import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .currency import format_amount
from .exceptions import SplitLedgerError, SplitValidationError
from .models import GroupBalanceSummary, Member, Split, SuggestedTransaction
from .service import LedgerService, load_ledger
from .splits import SPLIT_METHODS, split_method_label

app = typer.Typer(
    name="split-ledger",
    help="Group expense balances and settle-up suggestions",
)

console = Console()


def setup_logging(verbose: bool = False, level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def format_money(amount: Decimal, currency: str, use_color: bool = True) -> str:
    """
    Format a balance in accounting style.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    """
    formatted = format_amount(abs(amount), currency)
    if amount < 0:
        return f"([red]{formatted}[/red])" if use_color else f"({formatted})"
    return f" [green]{formatted}[/green] " if use_color else f" {formatted} "


def _names(members: list[Member]) -> dict[str, str]:
    return {member.id: member.name for member in members}


def display_summary(summary: GroupBalanceSummary, currency: str):
    """Display member balances in a table."""
    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Member", style="cyan")
    table.add_column("Balance", justify="right", width=14)
    table.add_column("Status", style="dim")

    for row in summary.members:
        if row.balance > 0:
            status = "is owed"
        elif row.balance < 0:
            status = "owes"
        else:
            status = "settled up"
        table.add_row(row.member.name, format_money(row.balance, currency), status)

    console.print(table)
    console.print(
        f"  Total owed: {format_amount(summary.total_owed, currency)}   "
        f"Total owing: {format_amount(summary.total_owing, currency)}   "
        f"Expenses: {summary.expense_count}"
    )


def display_transactions(
    transactions: list[SuggestedTransaction], members: list[Member], currency: str
):
    """Display suggested settle-up payments in a table."""
    names = _names(members)

    table = Table(title="Suggested Payments", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Amount", justify="right", width=14)

    for i, txn in enumerate(transactions, start=1):
        table.add_row(
            str(i),
            names.get(txn.from_member_id, txn.from_member_id),
            names.get(txn.to_member_id, txn.to_member_id),
            format_amount(txn.amount, currency),
        )

    console.print(table)


def display_splits(splits: list[Split], method: str):
    """Display calculated splits in a table."""
    table = Table(
        title=f"Splits ({split_method_label(method)})",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Member", style="cyan")
    table.add_column("Amount", justify="right", width=14)

    for split in splits:
        table.add_row(split.member_id, f"{split.amount:,.2f}")

    console.print(table)


def _parse_number(raw: str) -> Decimal | None:
    """A finite Decimal from command-line text, or None."""
    try:
        number = Decimal(raw)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def parse_values(values: list[str]) -> dict[str, Decimal]:
    """Parse ``member=value`` pairs from the command line."""
    parsed = {}
    for item in values:
        member_id, sep, raw = item.partition("=")
        if not sep or not member_id:
            raise typer.BadParameter(f"Expected MEMBER=VALUE, got {item!r}")
        value = _parse_number(raw)
        if value is None:
            raise typer.BadParameter(f"Not a number: {raw!r}")
        parsed[member_id] = value
    return parsed


@app.command()
def balances(
    ledger_file: Path = typer.Argument(..., help="JSON ledger snapshot"),
    home_currency: str | None = typer.Option(
        None, "--home-currency", help="Override the ledger's home currency"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show every member's net balance.

    Positive balances are owed money, negative balances owe money.
    """
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)

        ledger = load_ledger(ledger_file)
        if home_currency:
            ledger.home_currency = home_currency

        service = LedgerService(settings)
        currency = service.home_currency(ledger)
        summary = service.summarize(ledger)

        display_summary(summary, currency)

    except SplitLedgerError as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command("settle-up")
def settle_up(
    ledger_file: Path = typer.Argument(..., help="JSON ledger snapshot"),
    home_currency: str | None = typer.Option(
        None, "--home-currency", help="Override the ledger's home currency"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Suggest payments that would settle the group.

    Uses greedy largest-debtor/largest-creditor matching, which needs at most
    one payment fewer than the number of members.
    """
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)

        ledger = load_ledger(ledger_file)
        if home_currency:
            ledger.home_currency = home_currency

        service = LedgerService(settings)
        currency = service.home_currency(ledger)
        transactions, residuals = service.suggest_settlements(ledger)

        if not transactions:
            console.print("[green]Everyone is settled up.[/green]")
        else:
            display_transactions(transactions, ledger.members, currency)

        if residuals:
            names = _names(ledger.members)
            console.print(
                "\n[yellow]⚠️  Balances don't add up to zero; left over after these payments:[/yellow]"
            )
            for member_id, amount in residuals.items():
                console.print(
                    f"  {names.get(member_id, member_id)}: {format_money(amount, currency)}"
                )

    except SplitLedgerError as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def split(
    amount: str = typer.Argument(..., help="Expense total, e.g. 42.50"),
    method: str = typer.Option(
        "equal", "--method", "-m", help=f"Split method: {', '.join(SPLIT_METHODS)}"
    ),
    members: list[str] = typer.Option(
        [], "--member", "-p", help="Participant id (repeat for each member)"
    ),
    values: list[str] = typer.Option(
        [], "--value", help="MEMBER=VALUE exact amount, percentage or share count"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Calculate how an expense would be split.

    Participants default to the members named in --value when --member is
    not given.
    """
    setup_logging(verbose)

    total = _parse_number(amount)
    if total is None:
        console.print(f"[bold red]Error:[/bold red] Not a number: {amount!r}")
        sys.exit(1)

    method_data = parse_values(values)
    participants = members or list(method_data)

    try:
        settings = load_settings()
        service = LedgerService(settings)
        splits = service.create_splits(total, method, participants, method_data)
    except SplitValidationError as e:
        console.print(f"[bold red]Invalid split ({e.code}):[/bold red] {e}")
        sys.exit(1)
    except SplitLedgerError as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)

    display_splits(splits, method)


if __name__ == "__main__":
    app()
