"""Model invariant tests."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError

from carnes.models import Bill, BillFilter, BillPatch, Installment, PaymentStatus, Store
from carnes.schedule import generate_installments


def _bill(**overrides) -> Bill:
    params = {
        "id": "abc",
        "number": "1001",
        "issue_date": date(2024, 1, 10),
        "store": Store.LOJA_3,
        "customer": "João",
        "total_installments": 3,
        "installment_value": 100.0,
        "due_day": 5,
        "installments": generate_installments(date(2024, 1, 10), 3, 100.0, 5),
    }
    params.update(overrides)
    return Bill(**params)


def test_paid_installment_requires_payment_date():
    with pytest.raises(PydanticValidationError):
        Installment(number=1, due_date=date(2024, 2, 5), value=10.0, status=PaymentStatus.PAID)


def test_pending_installment_rejects_payment_date():
    with pytest.raises(PydanticValidationError):
        Installment(
            number=1,
            due_date=date(2024, 2, 5),
            value=10.0,
            payment_date=date(2024, 2, 1),
        )


def test_installment_value_must_be_positive():
    with pytest.raises(PydanticValidationError):
        Installment(number=1, due_date=date(2024, 2, 5), value=0)


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_installment_value_must_be_finite(value):
    with pytest.raises(PydanticValidationError):
        Installment(number=1, due_date=date(2024, 2, 5), value=value)


def test_bill_status_is_derived_from_installments():
    bill = _bill()
    assert bill.status == PaymentStatus.PENDING

    for inst in bill.installments[:-1]:
        inst.mark_paid(date(2024, 2, 1))
    assert bill.status == PaymentStatus.PENDING

    bill.installments[-1].mark_paid(date(2024, 2, 1))
    assert bill.status == PaymentStatus.PAID


def test_bill_status_cannot_be_set_from_input():
    data = _bill().model_dump(by_alias=True)
    data["status"] = "Paid"
    assert Bill.model_validate(data).status == PaymentStatus.PENDING


def test_bill_requires_contiguous_installments():
    installments = generate_installments(date(2024, 1, 10), 3, 100.0, 5)
    with pytest.raises(PydanticValidationError):
        _bill(installments=installments[:2])
    with pytest.raises(PydanticValidationError):
        _bill(installments=list(reversed(installments)))


def test_serialises_with_camel_case_names():
    data = _bill().model_dump(mode="json", by_alias=True)
    assert data["issueDate"] == "2024-01-10"
    assert data["totalInstallments"] == 3
    assert data["installmentValue"] == 100.0
    assert data["dueDay"] == 5
    assert data["status"] == "Pending"
    assert data["installments"][0]["dueDate"] == "2024-02-05"
    assert data["installments"][0]["paymentDate"] is None


def test_get_installment():
    bill = _bill()
    assert bill.get_installment(2).due_date == date(2024, 3, 5)
    assert bill.get_installment(0) is None
    assert bill.get_installment(4) is None


def test_patch_tracks_supplied_fields():
    assert BillPatch().changes() == {}
    assert BillPatch(observation="").changes() == {"observation": ""}
    assert BillPatch(observation=None).changes() == {"observation": None}
    assert BillPatch(installmentValue=80.0).changes() == {"installment_value": 80.0}


@pytest.mark.parametrize(
    "data",
    [
        {"customer": None},
        {"customer": "   "},
        {"installment_value": None},
        {"installment_value": 0},
        {"installment_value": float("nan")},
        {"installment_value": float("inf")},
    ],
)
def test_patch_rejects_invalid_values(data):
    with pytest.raises(PydanticValidationError):
        BillPatch(**data)


def test_filter_treats_blank_strings_as_missing():
    criteria = BillFilter(status="", store="", customer="  ", issue_date_from="")
    assert criteria.is_empty()


def test_filter_accepts_store_value():
    assert BillFilter(store="Loja 4").store == Store.LOJA_4
