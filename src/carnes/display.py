"""Rich display formatters for bills."""

from datetime import date
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .aggregation import (
    collection_stats,
    next_due_date,
    paid_count,
    remaining_amount,
    total_amount,
)
from .models import Bill, PaymentStatus

console = Console()


def format_currency(amount: float | None) -> str:
    """Format amount as Brazilian Real (R$ 1.234,56)."""
    if amount is None:
        return "-"
    text = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"


def format_date(d: Optional[date]) -> str:
    """Format date as DD/MM/YYYY."""
    if d is None:
        return "-"
    return d.strftime("%d/%m/%Y")


def get_payment_status(bill: Bill) -> str:
    """Short payment status summary, e.g. '2/5 paid'."""
    paid = paid_count(bill)
    if bill.status == PaymentStatus.PAID:
        return "Paid ✓"
    if paid == 0:
        return "Pending"
    return f"{paid}/{bill.total_installments} paid"


def display_bills_stats(stats: dict) -> None:
    """Display bill statistics."""
    console.print()
    console.print(
        f"[bold]Total: {stats['total_count']} bill(s)[/bold]  •  "
        f"{format_currency(stats['total_amount'])}"
    )

    paid_str = f"[green]Paid: {stats['paid_count']} ({format_currency(stats['paid_total'])})[/green]"
    pending_str = (
        f"[red]Pending: {stats['pending_count']} "
        f"({format_currency(stats['pending_total'])} remaining)[/red]"
    )
    console.print(f"├─ {paid_str}  •  {pending_str}")

    if stats["overdue_count"] > 0:
        console.print(f"├─ [bold red]Overdue installments: {stats['overdue_count']}[/bold red]")

    period_parts = []
    if stats["date_min"] and stats["date_max"]:
        if stats["date_min"] == stats["date_max"]:
            period_parts.append(f"Issued: {format_date(stats['date_min'])}")
        else:
            period_parts.append(
                f"Period: {format_date(stats['date_min'])} → {format_date(stats['date_max'])}"
            )

    period_parts.append(f"Customers: {stats['customers_count']}")

    console.print(f"└─ [dim]{' • '.join(period_parts)}[/dim]")


def display_bills_table(bills: list[Bill], title: str = "Carnês") -> None:
    """Display a table of bills."""
    if not bills:
        console.print("[yellow]No bills found.[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Number", justify="right")
    table.add_column("Issued", justify="center")
    table.add_column("Store")
    table.add_column("Customer", style="bold")
    table.add_column("Total", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("Next Due", justify="center")

    for bill in bills:
        status = get_payment_status(bill)

        if "✓" in status:
            status_text = f"[green]{status}[/green]"
        elif status == "Pending":
            status_text = f"[red]{status}[/red]"
        else:
            status_text = f"[yellow]{status}[/yellow]"

        table.add_row(
            bill.id,
            bill.number,
            format_date(bill.issue_date),
            bill.store.value,
            bill.customer,
            format_currency(total_amount(bill)),
            format_currency(remaining_amount(bill)),
            status_text,
            format_date(next_due_date(bill)),
        )

    console.print(table)

    display_bills_stats(collection_stats(bills))


def display_bill_details(bill: Bill) -> None:
    """Display detailed view of a single bill."""
    console.print()
    console.print(Panel(
        f"[bold]Carnê #{bill.number}[/bold] [dim]({bill.id})[/dim]",
        style="cyan",
        expand=False,
    ))

    details = Table(show_header=False, box=None, padding=(0, 2))
    details.add_column("Label", style="dim")
    details.add_column("Value")

    details.add_row("Customer:", bill.customer)
    details.add_row("Store:", bill.store.value)
    details.add_row("Issued:", format_date(bill.issue_date))
    details.add_row("Due day:", str(bill.due_day))
    details.add_row("Observation:", bill.observation or "-")
    details.add_row("", "")
    details.add_row("Installments:", f"{bill.total_installments} x {format_currency(bill.installment_value)}")
    details.add_row("Total:", f"[bold]{format_currency(total_amount(bill))}[/bold]")
    details.add_row("Remaining:", format_currency(remaining_amount(bill)))
    details.add_row("Status:", get_payment_status(bill))

    console.print(details)

    console.print()
    console.print("[bold]Payment Schedule[/bold]")
    console.print("─" * 50)

    for inst in bill.installments:
        if inst.status == PaymentStatus.PAID:
            icon = "[green]✓[/green]"
            paid_info = f" [dim](paid {format_date(inst.payment_date)})[/dim]"
        else:
            icon = "[yellow]○[/yellow]"
            paid_info = ""

        console.print(
            f"  {icon} Parcela {inst.number}/{bill.total_installments}: "
            f"{format_currency(inst.value)} - due {format_date(inst.due_date)}{paid_info}"
        )

    console.print()


def confirm(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm
    return Confirm.ask(message)
