"""Interactive wizard prompts for bill creation."""

from datetime import date

from rich.console import Console
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt

from .display import format_currency, format_date
from .models import BillInput, Store
from .schedule import generate_installments

console = Console()


def prompt_bill_wizard() -> BillInput:
    """Interactive wizard to create a bill."""
    console.print()
    console.print("[bold cyan]New Carnê[/bold cyan]")
    console.print("─" * 30)
    console.print()

    number = Prompt.ask("Booklet number")
    customer = Prompt.ask("Customer name")
    store = Prompt.ask(
        "Store",
        choices=[s.value for s in Store],
        default=Store.LOJA_2.value,
    )
    observation = Prompt.ask("Observation", default="")

    today_str = date.today().isoformat()
    date_str = Prompt.ask("Issue date", default=today_str)
    issue_date = date.fromisoformat(date_str)

    console.print()
    console.print("[bold]Installments[/bold]")
    console.print("─" * 30)
    total_installments = IntPrompt.ask("Number of installments", default=1)
    installment_value = FloatPrompt.ask("Installment value (R$)")
    due_day = IntPrompt.ask("Due day of month", default=issue_date.day)

    return BillInput(
        number=number,
        customer=customer,
        store=Store(store),
        observation=observation if observation else None,
        issue_date=issue_date,
        total_installments=total_installments,
        installment_value=installment_value,
        due_day=due_day,
    )


def confirm_bill_creation(bill: BillInput) -> bool:
    """Show bill summary and schedule, and ask for confirmation."""
    console.print()
    console.print("[bold cyan]Carnê Summary[/bold cyan]")
    console.print("═" * 40)
    console.print(f"  Number:       {bill.number}")
    console.print(f"  Customer:     {bill.customer}")
    console.print(f"  Store:        {bill.store.value}")
    console.print(f"  Issued:       {format_date(bill.issue_date)}")
    console.print(f"  Observation:  {bill.observation or '-'}")
    console.print("─" * 40)
    console.print(
        f"  Installments: {bill.total_installments} x {format_currency(bill.installment_value)}"
    )
    console.print(f"  Total:        {format_currency(bill.total_amount)}")

    schedule = generate_installments(
        bill.issue_date, bill.total_installments, bill.installment_value, bill.due_day
    )
    console.print(f"  First due:    {format_date(schedule[0].due_date)}")
    console.print(f"  Last due:     {format_date(schedule[-1].due_date)}")
    console.print("═" * 40)
    console.print()

    return Confirm.ask("Create this carnê?", default=True)
