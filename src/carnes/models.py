"""Pydantic models for bills, installments and their inputs."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class Store(str, Enum):
    """Issuing stores."""
    LOJA_2 = "Loja 2"
    LOJA_3 = "Loja 3"
    LOJA_4 = "Loja 4"


class PaymentStatus(str, Enum):
    """Payment status of an installment or a whole bill."""
    PENDING = "Pending"
    PAID = "Paid"


class CamelModel(BaseModel):
    """Base model serialised with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )


class Installment(CamelModel):
    """One scheduled payment of a bill."""

    number: int = Field(..., ge=1, description="1-indexed position in the bill")
    due_date: date = Field(..., description="Due date")
    value: float = Field(..., gt=0, description="Amount due")
    status: PaymentStatus = Field(PaymentStatus.PENDING, description="Payment status")
    payment_date: Optional[date] = Field(None, description="Set only when paid")

    @model_validator(mode="after")
    def check_payment_date(self) -> "Installment":
        """A payment date is present exactly when the installment is paid."""
        if self.is_paid != (self.payment_date is not None):
            raise ValueError(
                f"Installment {self.number}: payment date must be set iff status is Paid"
            )
        return self

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID

    def mark_paid(self, payment_date: date) -> None:
        """Mark as paid on the given date (overwrites a previous payment date)."""
        self.status = PaymentStatus.PAID
        self.payment_date = payment_date


class Bill(CamelModel):
    """An installment booklet: one issuance, N installments."""

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    number: str = Field(..., min_length=1, description="Booklet number")
    issue_date: date = Field(..., description="Issue date")
    store: Store = Field(..., description="Issuing store")
    customer: str = Field(..., min_length=1, description="Customer name")
    total_installments: int = Field(..., ge=1, description="Number of installments")
    installment_value: float = Field(..., gt=0, description="Nominal installment amount")
    due_day: int = Field(..., ge=1, le=31, description="Target day of month")
    observation: Optional[str] = Field(None, description="Free text notes")
    installments: list[Installment] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_installments(self) -> "Bill":
        """Installments are numbered 1..total_installments, in order."""
        numbers = [inst.number for inst in self.installments]
        if numbers != list(range(1, self.total_installments + 1)):
            raise ValueError(
                f"Bill {self.id}: expected installments 1..{self.total_installments}, "
                f"got {numbers}"
            )
        return self

    @computed_field
    @property
    def status(self) -> PaymentStatus:
        """Paid iff every installment is paid."""
        if all(inst.is_paid for inst in self.installments):
            return PaymentStatus.PAID
        return PaymentStatus.PENDING

    def get_installment(self, number: int) -> Optional[Installment]:
        """Return installment by its 1-indexed number, or None."""
        if 1 <= number <= len(self.installments):
            return self.installments[number - 1]
        return None


class BillInput(CamelModel):
    """Input model for creating a bill."""

    number: str = Field(..., min_length=1, description="Booklet number")
    issue_date: date = Field(default_factory=date.today, description="Issue date")
    store: Store = Field(..., description="Issuing store")
    customer: str = Field(..., min_length=1, description="Customer name")
    total_installments: int = Field(..., ge=1, description="Number of installments")
    installment_value: float = Field(..., gt=0, description="Amount of each installment")
    due_day: int = Field(..., ge=1, le=31, description="Target day of month")
    observation: Optional[str] = Field(None, description="Free text notes")

    @property
    def total_amount(self) -> float:
        """Sum of all installments."""
        return round(self.total_installments * self.installment_value, 2)


class BillPatch(CamelModel):
    """
    Partial update of a whole bill.

    Only fields explicitly passed are applied: ``BillPatch(observation="")``
    clears the observation while ``BillPatch()`` leaves it untouched.
    """

    customer: Optional[str] = Field(None, min_length=1)
    observation: Optional[str] = None
    installment_value: Optional[float] = Field(None, gt=0)

    @field_validator("customer", "installment_value")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("cannot be cleared")
        return v

    def changes(self) -> dict:
        """Return only the fields that were supplied."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class BillFilter(CamelModel):
    """Criteria for filtering bills. Empty criteria impose no filter."""

    status: Optional[PaymentStatus] = None
    store: Optional[Store] = None
    customer: Optional[str] = None
    issue_date_from: Optional[date] = None
    issue_date_to: Optional[date] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)
