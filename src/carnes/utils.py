"""Date utilities."""

import calendar
from datetime import date

from dateutil.relativedelta import relativedelta


def end_of_month(year: int, month: int) -> date:
    """Return the last day of the given month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, last_day)


def add_months(d: date, months: int) -> date:
    """Add N months to a date, preserving end-of-month behavior."""
    return d + relativedelta(months=months)


def compute_due_date(issue_date: date, installment_index: int, due_day: int) -> date:
    """
    Compute the due date of an installment.

    Installment 0 falls in the month after the issue month, each following
    installment one month later. The day is ``due_day``, clamped to the
    last day of the target month.

    Example: issue_date=2024-01-15, due_day=31:
        index 0 -> 2024-02-29
        index 1 -> 2024-03-31
        index 2 -> 2024-04-30
    """
    target = add_months(issue_date.replace(day=1), installment_index + 1)
    last_day = end_of_month(target.year, target.month).day
    return target.replace(day=min(due_day, last_day))


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD string."""
    return date.fromisoformat(value.strip())
