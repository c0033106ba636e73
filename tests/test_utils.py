"""Due date arithmetic tests."""

from __future__ import annotations

from datetime import date

import pytest

from carnes.utils import add_months, compute_due_date, end_of_month


def test_first_installment_is_due_the_month_after_issue():
    assert compute_due_date(date(2024, 1, 10), 0, 5) == date(2024, 2, 5)


def test_due_day_clamped_to_leap_february():
    assert compute_due_date(date(2024, 1, 15), 0, 31) == date(2024, 2, 29)


def test_due_day_clamped_to_non_leap_february():
    assert compute_due_date(date(2023, 1, 15), 0, 31) == date(2023, 2, 28)


def test_due_day_clamped_to_30_day_month():
    # March + 1 -> April has 30 days
    assert compute_due_date(date(2024, 3, 1), 0, 31) == date(2024, 4, 30)


def test_clamping_does_not_carry_over_to_next_installments():
    issue = date(2024, 1, 31)
    assert [compute_due_date(issue, i, 31) for i in range(3)] == [
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_rolls_over_year_boundary():
    assert compute_due_date(date(2024, 11, 20), 0, 10) == date(2024, 12, 10)
    assert compute_due_date(date(2024, 11, 20), 1, 10) == date(2025, 1, 10)
    assert compute_due_date(date(2024, 12, 31), 0, 31) == date(2025, 1, 31)


def test_issue_day_does_not_matter():
    # An issue date on the 31st must not push the month forward
    assert compute_due_date(date(2024, 1, 31), 0, 5) == date(2024, 2, 5)


def test_long_schedule_spans_years():
    assert compute_due_date(date(2024, 1, 10), 23, 15) == date(2026, 1, 15)


@pytest.mark.parametrize(
    "year,month,expected",
    [
        (2024, 2, date(2024, 2, 29)),
        (2023, 2, date(2023, 2, 28)),
        (1900, 2, date(1900, 2, 28)),
        (2000, 2, date(2000, 2, 29)),
        (2024, 12, date(2024, 12, 31)),
    ],
)
def test_end_of_month(year, month, expected):
    assert end_of_month(year, month) == expected


def test_add_months_preserves_end_of_month():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
