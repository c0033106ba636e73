"""Derived amounts and statistics over bills."""

from datetime import date
from typing import Iterable, Optional

from .models import Bill, Installment, PaymentStatus


def total_amount(bill: Bill) -> float:
    """Sum of all installment values."""
    return round(sum(inst.value for inst in bill.installments), 2)


def remaining_amount(bill: Bill) -> float:
    """Sum of pending installment values."""
    return round(
        sum(inst.value for inst in bill.installments if inst.status == PaymentStatus.PENDING),
        2,
    )


def paid_amount(bill: Bill) -> float:
    """Sum of paid installment values."""
    return round(
        sum(inst.value for inst in bill.installments if inst.status == PaymentStatus.PAID),
        2,
    )


def paid_count(bill: Bill) -> int:
    """Number of paid installments."""
    return sum(1 for inst in bill.installments if inst.status == PaymentStatus.PAID)


def next_due_date(bill: Bill) -> Optional[date]:
    """Earliest due date among pending installments, or None when fully paid."""
    pending = [inst.due_date for inst in bill.installments if inst.status == PaymentStatus.PENDING]
    return min(pending) if pending else None


def overdue_installments(bill: Bill, today: date) -> list[Installment]:
    """Pending installments whose due date has passed."""
    return [
        inst
        for inst in bill.installments
        if inst.status == PaymentStatus.PENDING and inst.due_date < today
    ]


def collection_stats(bills: Iterable[Bill], today: Optional[date] = None) -> dict:
    """Calculate statistics for a list of bills."""
    today = today or date.today()

    # Initialize counters
    total = 0.0
    paid_bills = 0
    paid_total = 0.0
    pending_bills = 0
    pending_total = 0.0
    overdue_count = 0
    dates = []
    customers = set()
    count = 0

    for bill in bills:
        count += 1
        total += total_amount(bill)
        paid_total += paid_amount(bill)
        pending_total += remaining_amount(bill)

        if bill.status == PaymentStatus.PAID:
            paid_bills += 1
        else:
            pending_bills += 1
            overdue_count += len(overdue_installments(bill, today))

        dates.append(bill.issue_date)
        customers.add(bill.customer.casefold())

    return {
        "total_count": count,
        "total_amount": round(total, 2),
        "paid_count": paid_bills,
        "paid_total": round(paid_total, 2),
        "pending_count": pending_bills,
        "pending_total": round(pending_total, 2),
        "overdue_count": overdue_count,
        "date_min": min(dates) if dates else None,
        "date_max": max(dates) if dates else None,
        "customers_count": len(customers),
    }
