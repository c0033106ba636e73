"""CLI commands for carnes."""

from datetime import date
from typing import Annotated, NoReturn, Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console

from . import __version__
from .aggregation import next_due_date, remaining_amount
from .config import load_settings, save_config
from .display import (
    confirm,
    display_bill_details,
    display_bills_table,
    format_currency,
    format_date,
)
from .errors import CarneError, StorageError
from .lifecycle import BillService
from .logging_config import setup_logging
from .models import BillFilter, BillInput, BillPatch, PaymentStatus, Store
from .prompts import confirm_bill_creation, prompt_bill_wizard
from .repository import JsonFileRepository
from .utils import parse_iso_date

app = typer.Typer(
    name="carnes",
    help="CLI tool to manage installment payment booklets (carnês)",
    no_args_is_help=True,
)
console = Console()


def parse_date(date_str: str | None) -> date | None:
    """Parse date string in YYYY-MM-DD format."""
    if date_str is None:
        return None
    try:
        return parse_iso_date(date_str)
    except ValueError:
        raise typer.BadParameter(f"Invalid date format: {date_str}. Use YYYY-MM-DD")


def get_service() -> BillService:
    """Build the lifecycle service on the configured data file."""
    settings = load_settings()
    return BillService(JsonFileRepository(settings.data_file))


def fail(error: Exception) -> NoReturn:
    """Print an error and exit with status 1."""
    if isinstance(error, StorageError):
        console.print(f"[red]Storage error:[/red] {error}")
    else:
        console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


def version_callback(value: bool):
    if value:
        console.print(f"carnes version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
):
    """Manage installment payment booklets."""
    try:
        setup_logging(load_settings().log_level)
    except PydanticValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {e.errors()[0]['msg']}")
        raise typer.Exit(1)


# ============================================================================
# LIST COMMAND
# ============================================================================

@app.command(name="list")
def list_bills(
    status: Annotated[
        Optional[PaymentStatus],
        typer.Option("--status", help="Show only bills with this status", case_sensitive=False),
    ] = None,
    store: Annotated[
        Optional[Store],
        typer.Option("--store", help="Show only bills from this store"),
    ] = None,
    customer: Annotated[
        Optional[str],
        typer.Option("--customer", "-c", help="Filter by customer name (partial match)"),
    ] = None,
    from_date: Annotated[
        Optional[str],
        typer.Option("--from", help="Issued on or after this date (YYYY-MM-DD)"),
    ] = None,
    to_date: Annotated[
        Optional[str],
        typer.Option("--to", help="Issued on or before this date (YYYY-MM-DD)"),
    ] = None,
):
    """List bills, optionally filtered."""
    criteria = BillFilter(
        status=status,
        store=store,
        customer=customer,
        issue_date_from=parse_date(from_date),
        issue_date_to=parse_date(to_date),
    )
    try:
        bills = get_service().list_bills(criteria)
    except CarneError as e:
        fail(e)

    display_bills_table(bills)


# ============================================================================
# SHOW COMMAND
# ============================================================================

@app.command()
def show(
    bill_id: Annotated[str, typer.Argument(help="Bill ID to show")],
):
    """Show detailed view of a single bill."""
    try:
        bill = get_service().get_bill(bill_id)
    except CarneError as e:
        fail(e)

    display_bill_details(bill)


# ============================================================================
# CREATE COMMAND
# ============================================================================

@app.command()
def create(
    number: Annotated[
        Optional[str],
        typer.Option("--number", "-n", help="Booklet number"),
    ] = None,
    store: Annotated[
        Optional[Store],
        typer.Option("--store", "-s", help="Issuing store"),
    ] = None,
    customer: Annotated[
        Optional[str],
        typer.Option("--customer", "-c", help="Customer name"),
    ] = None,
    issue_date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Issue date (YYYY-MM-DD, default: today)"),
    ] = None,
    installments: Annotated[
        int,
        typer.Option("--installments", "-i", help="Number of installments"),
    ] = 1,
    value: Annotated[
        Optional[float],
        typer.Option("--value", "-a", help="Amount of each installment"),
    ] = None,
    due_day: Annotated[
        Optional[int],
        typer.Option("--due-day", help="Due day of month (default: issue day)"),
    ] = None,
    observation: Annotated[
        Optional[str],
        typer.Option("--observation", "-o", help="Free text notes"),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
):
    """
    Create a new carnê.

    Without --customer, starts an interactive wizard.
    With arguments, creates the bill directly (use --yes to skip confirmation).
    """
    try:
        if customer is None:
            bill_input = prompt_bill_wizard()
            if not confirm_bill_creation(bill_input):
                console.print("[yellow]Cancelled.[/yellow]")
                return
        else:
            missing = [
                flag
                for flag, given in (("--number", number), ("--store", store), ("--value", value))
                if given is None
            ]
            if missing:
                console.print(f"[red]Error:[/red] {', '.join(missing)} required in CLI mode")
                raise typer.Exit(1)

            actual_issue_date = parse_date(issue_date) or date.today()
            bill_input = BillInput(
                number=number,
                store=store,
                customer=customer,
                issue_date=actual_issue_date,
                total_installments=installments,
                installment_value=value,
                due_day=due_day if due_day is not None else actual_issue_date.day,
                observation=observation,
            )

            if not yes:
                if not confirm_bill_creation(bill_input):
                    console.print("[yellow]Cancelled.[/yellow]")
                    return

        bill = get_service().create_bill(bill_input)

    except PydanticValidationError as e:
        console.print(f"[red]Error:[/red] {e.errors()[0]['loc'][0]}: {e.errors()[0]['msg']}")
        raise typer.Exit(1)
    except CarneError as e:
        fail(e)

    console.print(f"[green]✓[/green] Created carnê #{bill.number} ({bill.id})")
    display_bill_details(bill)


# ============================================================================
# EDIT COMMANDS
# ============================================================================

@app.command()
def edit(
    bill_id: Annotated[str, typer.Argument(help="Bill ID to edit")],
    customer: Annotated[
        Optional[str],
        typer.Option("--customer", "-c", help="New customer name"),
    ] = None,
    observation: Annotated[
        Optional[str],
        typer.Option("--observation", "-o", help="New observation (empty string clears it)"),
    ] = None,
    value: Annotated[
        Optional[float],
        typer.Option("--value", "-a", help="New value for every installment"),
    ] = None,
):
    """Edit a whole carnê. --value rewrites every installment, paid or not."""
    supplied = {
        name: given
        for name, given in (
            ("customer", customer),
            ("observation", observation),
            ("installment_value", value),
        )
        if given is not None
    }
    if not supplied:
        console.print("[yellow]Nothing to change.[/yellow] Use --customer, --observation or --value.")
        raise typer.Exit(1)

    try:
        bill = get_service().edit_full_bill(bill_id, BillPatch(**supplied))
    except PydanticValidationError as e:
        console.print(f"[red]Error:[/red] {e.errors()[0]['loc'][0]}: {e.errors()[0]['msg']}")
        raise typer.Exit(1)
    except CarneError as e:
        fail(e)

    console.print(f"[green]✓[/green] Carnê #{bill.number} updated")
    display_bill_details(bill)


@app.command(name="edit-installment")
def edit_installment(
    bill_id: Annotated[str, typer.Argument(help="Bill ID")],
    number: Annotated[int, typer.Argument(help="Installment number (1-indexed)")],
    value: Annotated[float, typer.Argument(help="New installment value")],
):
    """Change the value of a single installment."""
    try:
        bill = get_service().edit_installment(bill_id, number, value)
    except CarneError as e:
        fail(e)

    console.print(f"[green]✓[/green] Installment {number} of carnê #{bill.number} updated")
    display_bill_details(bill)


# ============================================================================
# PAY COMMAND
# ============================================================================

@app.command()
def pay(
    bill_id: Annotated[
        Optional[str],
        typer.Argument(help="Bill ID to mark as paid"),
    ] = None,
    installment: Annotated[
        Optional[int],
        typer.Option("--installment", "-i", help="Mark only this installment as paid (1-indexed)"),
    ] = None,
    payment_date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Payment date (default: today, format: YYYY-MM-DD)"),
    ] = None,
    customer: Annotated[
        Optional[str],
        typer.Option("--customer", "-c", help="Pay all bills of this customer"),
    ] = None,
    store: Annotated[
        Optional[Store],
        typer.Option("--store", "-s", help="Pay all bills of this store"),
    ] = None,
    from_date: Annotated[
        Optional[str],
        typer.Option("--from", help="Pay bills issued from this date"),
    ] = None,
    to_date: Annotated[
        Optional[str],
        typer.Option("--to", help="Pay bills issued up to this date"),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation for batch operations"),
    ] = False,
):
    """
    Mark bill(s) as paid.

    Can pay a single installment, all remaining installments of a bill, or
    batch by customer/store/issue date range.
    """
    actual_payment_date = parse_date(payment_date)
    actual_from_date = parse_date(from_date)
    actual_to_date = parse_date(to_date)

    try:
        service = get_service()

        # Single bill
        if bill_id is not None:
            if installment is not None:
                bill = service.pay_installment(bill_id, installment, actual_payment_date)
                console.print(f"[green]✓[/green] Installment {installment} of carnê #{bill.number} paid")
            else:
                bill = service.pay_all_remaining(bill_id, actual_payment_date)
                console.print(f"[green]✓[/green] Carnê #{bill.number} paid")
            display_bill_details(bill)
            return

        # Batch by customer, store or date range
        if not customer and store is None and not actual_from_date and not actual_to_date:
            console.print("[red]Error:[/red] Provide a bill ID or use --customer/--store/--from/--to for batch")
            raise typer.Exit(1)

        pending = service.list_bills(BillFilter(
            status=PaymentStatus.PENDING,
            store=store,
            customer=customer,
            issue_date_from=actual_from_date,
            issue_date_to=actual_to_date,
        ))

        if not pending:
            console.print("[yellow]No pending bills match the criteria.[/yellow]")
            return

        console.print(f"\n[bold]Found {len(pending)} pending bill(s):[/bold]")
        display_bills_table(pending, title="Pending carnês")

        if not yes:
            total = sum(remaining_amount(b) for b in pending)
            if not confirm(f"Pay the remaining {format_currency(total)} of these {len(pending)} bill(s)?"):
                console.print("[yellow]Cancelled.[/yellow]")
                return

        for bill in pending:
            service.pay_all_remaining(bill.id, actual_payment_date)
            console.print(f"[green]✓[/green] Paid carnê #{bill.number} ({bill.customer})")

        console.print(f"\n[bold green]Done![/bold green] Paid {len(pending)} bill(s).")

    except CarneError as e:
        fail(e)


# ============================================================================
# DELETE COMMAND
# ============================================================================

@app.command()
def delete(
    bill_id: Annotated[str, typer.Argument(help="Bill ID to delete")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
):
    """Delete a carnê and all its installments."""
    try:
        service = get_service()
        bill = service.get_bill(bill_id)

        if not yes:
            due = next_due_date(bill)
            note = f", next due {format_date(due)}" if due else ""
            if not confirm(f"Delete carnê #{bill.number} of {bill.customer}{note}?"):
                console.print("[yellow]Cancelled.[/yellow]")
                return

        service.delete_bill(bill_id)
    except CarneError as e:
        fail(e)

    console.print(f"[green]✓[/green] Carnê #{bill.number} deleted")


# ============================================================================
# CONFIG COMMAND
# ============================================================================

@app.command()
def config(
    data_file: Annotated[
        Optional[str],
        typer.Option("--data-file", help="JSON file holding the bills"),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"),
    ] = None,
):
    """Show or update settings stored in the .env file."""
    if data_file or log_level:
        try:
            env_path = save_config(data_file=data_file, log_level=log_level)
        except PydanticValidationError as e:
            console.print(f"[red]Error:[/red] {e.errors()[0]['msg']}")
            raise typer.Exit(1)
        console.print(f"[green]✓[/green] Configuration saved to {env_path}")

    settings = load_settings()
    console.print(f"Data file: [cyan]{settings.data_file}[/cyan]")
    console.print(f"Log level: [cyan]{settings.log_level}[/cyan]")


if __name__ == "__main__":
    app()
