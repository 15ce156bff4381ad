"""CLI for trip-split using Typer."""

import json
import logging
import sys
from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .clients.translator import TranslationSession, Translator
from .config import load_settings
from .ledger import TripLedger
from .loader import load_trip_document
from .models import SettlementReport, TripSettings
from .settlement import apply_transfers, is_settled, quantize_amount
from .ui import run_translation_repl

app = typer.Typer(
    name="trip-split",
    help="Settle shared trip expenses and translate on the go",
)

console = Console()

CURRENCY_SYMBOLS = {
    "TWD": "NT$",
    "JPY": "¥",
    "USD": "$",
    "EUR": "€",
    "KRW": "₩",
}


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_money(amount: Decimal, currency: str, use_color: bool = True) -> str:
    """
    Format money in accounting style with a currency symbol.

    Negative amounts use parentheses: (¥1,000.00)
    Positive amounts have spaces:      ¥1,000.00
    """
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            return f"({symbol}[red]{abs_amount:,.2f}[/red])"
        return f"({symbol}{abs_amount:,.2f})"
    if use_color:
        return f" [green]{symbol}{abs_amount:,.2f}[/green] "
    return f" {symbol}{abs_amount:,.2f} "


def load_ledger(path: Path) -> TripLedger:
    """Load a trip file, using configured currencies for bare expense lists."""
    settings = load_settings()
    defaults = TripSettings(
        home_currency=settings.home_currency,
        destination_currency=settings.destination_currency,
    )
    return TripLedger.from_document(load_trip_document(path, defaults))


@app.command()
def settle(
    trip_file: Path = typer.Argument(..., help="Trip JSON file with expenses"),
    currency: str | None = typer.Option(
        None, "--currency", "-C", help="Only show this currency"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print transfers as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Compute who pays whom to settle all shared expenses.

    Each currency is settled on its own; amounts are never converted.
    """
    setup_logging(verbose)

    try:
        ledger = load_ledger(trip_file)
        report = ledger.settle_report()

        if currency:
            currency = currency.upper()
            report = SettlementReport(
                transfers=report.transfers_for(currency),
                balances={
                    c: b for c, b in report.balances.items() if c == currency
                },
                skipped_expense_ids=report.skipped_expense_ids,
            )

        if as_json:
            payload = [
                t.model_dump(mode="json", by_alias=True) for t in report.transfers
            ]
            typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
            return

        display_report(report)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


def display_report(report: SettlementReport):
    """Display balances and transfers per currency."""
    if report.skipped_expense_ids:
        console.print(
            f"\n[yellow]⚠️  Skipped {len(report.skipped_expense_ids)} shared "
            f"expense(s) with no participants: "
            f"{', '.join(report.skipped_expense_ids)}[/yellow]"
        )

    if not report.balances:
        console.print("\n[green]No shared expenses. Everyone is settled.[/green]")
        return

    for currency in report.currencies:
        balances = report.balances[currency]
        transfers = report.transfers_for(currency)

        console.print(f"\n[bold]{currency}[/bold]")

        table = Table(title="Balances", show_header=True, header_style="bold magenta")
        table.add_column("Member", style="cyan")
        table.add_column("Balance", justify="right")
        for member, balance in sorted(balances.items()):
            table.add_row(member, format_money(quantize_amount(balance), currency))
        console.print(table)

        if not transfers:
            console.print("  [green]✓ Balanced, no transfers needed[/green]")
            continue

        table = Table(title="Transfers", show_header=True, header_style="bold magenta")
        table.add_column("From", style="cyan")
        table.add_column("To", style="cyan")
        table.add_column("Amount", justify="right")
        for transfer in transfers:
            table.add_row(
                transfer.from_member,
                transfer.to_member,
                format_money(transfer.amount, currency),
            )
        console.print(table)

        # Verification
        remaining = apply_transfers(balances, transfers)
        if all(is_settled(balance) for balance in remaining.values()):
            console.print("  [green]✓ All balances settle to zero[/green]")
        else:
            console.print("  [red]✗ Transfers leave balances unsettled[/red]")


@app.command()
def summary(
    trip_file: Path = typer.Argument(..., help="Trip JSON file with expenses"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show total spend per currency and expenses grouped by day."""
    setup_logging(verbose)

    try:
        ledger = load_ledger(trip_file)

        console.print(f"\n[bold]{ledger.settings.name}[/bold]")
        if ledger.members:
            console.print(f"  Members: {', '.join(ledger.members)}")

        totals = ledger.totals_by_currency()
        if not totals:
            console.print("[yellow]No expenses recorded.[/yellow]")
            return

        for currency, total in totals.items():
            console.print(f"  Total {currency}: {format_money(total, currency)}")

        for day, expenses in ledger.expenses_by_date().items():
            table = Table(
                title=f"{day} ({len(expenses)})",
                show_header=True,
                header_style="bold magenta",
            )
            table.add_column("Description", style="cyan", width=30)
            table.add_column("Payer", style="yellow")
            table.add_column("Amount", justify="right")
            table.add_column("Split", style="dim")
            for expense in expenses:
                split = (
                    ", ".join(expense.participants) if expense.is_shared else "personal"
                )
                table.add_row(
                    expense.description or "—",
                    expense.payer,
                    format_money(expense.amount, expense.currency),
                    split,
                )
            console.print(table)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def translate(
    text: str | None = typer.Argument(
        None, help="Text to translate (omit for an interactive session)"
    ),
    to: str | None = typer.Option(None, "--to", "-t", help="Target language"),
    source: str | None = typer.Option(
        None, "--from", "-f", help="Source language (default: auto-detect)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Translate a phrase, or start an interactive translation session."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        translator = Translator(settings.openai_api_key, settings.translation_model)
        target = to or settings.default_target_language

        if text is None:
            session = TranslationSession(translator, target, source)
            run_translation_repl(session)
            return

        typer.echo(translator.translate(text, target, source))

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    app()
