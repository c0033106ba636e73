"""Installment schedule generation."""

import math
from datetime import date

from .errors import InvalidScheduleError
from .models import Installment, PaymentStatus
from .utils import compute_due_date


def generate_installments(
    issue_date: date,
    total_installments: int,
    installment_value: float,
    due_day: int,
) -> list[Installment]:
    """
    Generate the pending installments of a new bill.

    Installment N is due N months after the issue month, on ``due_day``
    (clamped to the month length).

    Example: issue_date=2024-01-10, 3 installments, due_day=5:
        -> [2024-02-05, 2024-03-05, 2024-04-05]

    Raises:
        InvalidScheduleError: if any parameter is out of range
    """
    if total_installments < 1:
        raise InvalidScheduleError(
            f"Number of installments must be at least 1 (got {total_installments})"
        )
    if not math.isfinite(installment_value) or installment_value <= 0:
        raise InvalidScheduleError(
            f"Installment value must be a positive amount (got {installment_value})"
        )
    if not 1 <= due_day <= 31:
        raise InvalidScheduleError(f"Due day must be between 1 and 31 (got {due_day})")

    return [
        Installment(
            number=index + 1,
            due_date=compute_due_date(issue_date, index, due_day),
            value=installment_value,
            status=PaymentStatus.PENDING,
        )
        for index in range(total_installments)
    ]
