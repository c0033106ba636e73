"""Bill filtering."""

from typing import Iterable

from .models import Bill, BillFilter


def matches(bill: Bill, criteria: BillFilter) -> bool:
    """Check a bill against every set criterion."""
    if criteria.status is not None and bill.status != criteria.status:
        return False
    if criteria.store is not None and bill.store != criteria.store:
        return False
    if criteria.customer and criteria.customer.casefold() not in bill.customer.casefold():
        return False
    if criteria.issue_date_from is not None and bill.issue_date < criteria.issue_date_from:
        return False
    if criteria.issue_date_to is not None and bill.issue_date > criteria.issue_date_to:
        return False
    return True


def filter_bills(
    bills: Iterable[Bill],
    criteria: BillFilter | None = None,
    **kwargs,
) -> list[Bill]:
    """
    Filter bills, preserving their order.

    Criteria are combined with AND. They can be passed as a BillFilter or
    as keyword arguments, e.g. ``filter_bills(bills, store="Loja 2")``.
    The input collection is never modified.
    """
    if criteria is None:
        criteria = BillFilter(**kwargs)
    elif kwargs:
        criteria = criteria.model_copy(update=BillFilter(**kwargs).model_dump(exclude_unset=True))

    return [bill for bill in bills if matches(bill, criteria)]
