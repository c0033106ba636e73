"""Installment schedule generation tests."""

from __future__ import annotations

from datetime import date

import pytest

from carnes.errors import InvalidScheduleError, ValidationError
from carnes.models import PaymentStatus
from carnes.schedule import generate_installments


def test_generates_pending_installments_in_order():
    installments = generate_installments(date(2024, 1, 10), 3, 100.0, 5)

    assert [i.number for i in installments] == [1, 2, 3]
    assert [i.due_date for i in installments] == [
        date(2024, 2, 5),
        date(2024, 3, 5),
        date(2024, 4, 5),
    ]
    assert all(i.value == 100.0 for i in installments)
    assert all(i.status == PaymentStatus.PENDING for i in installments)
    assert all(i.payment_date is None for i in installments)


@pytest.mark.parametrize("total", [1, 2, 12, 24, 60])
@pytest.mark.parametrize("due_day", [1, 15, 28, 29, 30, 31])
def test_due_dates_one_month_apart(total, due_day):
    installments = generate_installments(date(2023, 11, 30), total, 49.9, due_day)

    assert len(installments) == total
    assert [i.number for i in installments] == list(range(1, total + 1))
    dates = [i.due_date for i in installments]
    for earlier, later in zip(dates, dates[1:]):
        assert later > earlier
        months_apart = (later.year - earlier.year) * 12 + later.month - earlier.month
        assert months_apart == 1
    assert all(d.day <= due_day for d in dates)


def test_single_installment():
    installments = generate_installments(date(2024, 12, 20), 1, 250.0, 10)
    assert len(installments) == 1
    assert installments[0].due_date == date(2025, 1, 10)


@pytest.mark.parametrize(
    "total,value,due_day",
    [
        (0, 100.0, 5),
        (-1, 100.0, 5),
        (3, 0.0, 5),
        (3, -10.0, 5),
        (3, float("nan"), 5),
        (3, float("inf"), 5),
        (3, 100.0, 0),
        (3, 100.0, 32),
    ],
)
def test_invalid_parameters_rejected(total, value, due_day):
    with pytest.raises(InvalidScheduleError):
        generate_installments(date(2024, 1, 10), total, value, due_day)


def test_invalid_schedule_is_a_validation_error():
    with pytest.raises(ValidationError):
        generate_installments(date(2024, 1, 10), 0, 100.0, 5)
