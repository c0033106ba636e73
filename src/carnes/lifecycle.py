"""Bill lifecycle: creation, edits and payments."""

import logging
import math
import uuid
from datetime import date
from typing import Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, ValidationError
from .models import Bill, BillFilter, BillInput, BillPatch, PaymentStatus
from .query import filter_bills
from .repository import BillRepository
from .schedule import generate_installments

logger = logging.getLogger(__name__)


class Clock(Protocol):
    def now(self) -> date:
        ...


class SystemClock:
    """Clock returning today's local date."""

    def now(self) -> date:
        return date.today()


class FixedClock:
    """Clock frozen on a given day."""

    def __init__(self, today: date):
        self.today = today

    def now(self) -> date:
        return self.today


def _validation_message(error: PydanticValidationError) -> str:
    """Flatten a pydantic error into one readable line."""
    parts = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err["loc"]) or "input"
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)


class BillService:
    """
    Installment lifecycle engine.

    Every mutating call loads the full collection, changes one bill and
    saves the full collection back before returning. Input is validated
    before anything is changed, so a rejected call leaves stored state as
    it was.
    """

    def __init__(self, repository: BillRepository, clock: Clock | None = None):
        self.repository = repository
        self.clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_bills(self, criteria: BillFilter | None = None) -> list[Bill]:
        """List stored bills, optionally filtered."""
        return filter_bills(self.repository.load(), criteria)

    def get_bill(self, bill_id: str) -> Bill:
        """Get a single bill by ID."""
        return self._find(self.repository.load(), bill_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_bill(self, params: BillInput | dict) -> Bill:
        """
        Create a bill and its installment schedule.

        Args:
            params: Creation parameters (BillInput or a dict of its fields)

        Returns:
            The stored bill

        Raises:
            ValidationError: if a field is missing or out of range
        """
        if not isinstance(params, BillInput):
            try:
                params = BillInput.model_validate(params)
            except PydanticValidationError as e:
                logger.warning("Rejected bill creation: %s", _validation_message(e))
                raise ValidationError(_validation_message(e)) from e

        installments = generate_installments(
            issue_date=params.issue_date,
            total_installments=params.total_installments,
            installment_value=params.installment_value,
            due_day=params.due_day,
        )
        bill = Bill(
            id=uuid.uuid4().hex[:12],
            number=params.number,
            issue_date=params.issue_date,
            store=params.store,
            customer=params.customer,
            total_installments=params.total_installments,
            installment_value=params.installment_value,
            due_day=params.due_day,
            observation=params.observation,
            installments=installments,
        )

        bills = self.repository.load()
        bills.append(bill)
        self.repository.save_all(bills)
        logger.info(
            "Created bill %s (#%s, %s, %d installments)",
            bill.id, bill.number, bill.customer, bill.total_installments,
        )
        return bill

    def edit_full_bill(self, bill_id: str, changes: BillPatch | dict) -> Bill:
        """
        Apply a partial update to a bill.

        A supplied ``installment_value`` is written to the bill and to every
        installment, paid ones included. Status and due dates are unchanged.

        Raises:
            NotFoundError: if the bill does not exist
            ValidationError: if the patch is malformed
        """
        if not isinstance(changes, BillPatch):
            try:
                changes = BillPatch.model_validate(changes)
            except PydanticValidationError as e:
                logger.warning("Rejected edit of bill %s: %s", bill_id, _validation_message(e))
                raise ValidationError(_validation_message(e)) from e

        bills = self.repository.load()
        bill = self._find(bills, bill_id)
        updates = changes.changes()

        if "customer" in updates:
            bill.customer = updates["customer"]
        if "observation" in updates:
            bill.observation = updates["observation"]
        if "installment_value" in updates:
            bill.installment_value = updates["installment_value"]
            for inst in bill.installments:
                inst.value = updates["installment_value"]

        self.repository.save_all(bills)
        logger.info("Edited bill %s (%s)", bill_id, ", ".join(sorted(updates)) or "no changes")
        return bill

    def edit_installment(self, bill_id: str, installment_number: int, new_value: float) -> Bill:
        """
        Change the value of a single installment.

        Raises:
            NotFoundError: if the bill or installment does not exist
            ValidationError: if ``new_value`` is not positive
        """
        bills = self.repository.load()
        bill = self._find(bills, bill_id)
        installment = self._find_installment(bill, installment_number)

        if new_value is None or not math.isfinite(new_value) or new_value <= 0:
            logger.warning(
                "Rejected value %s for installment %d of bill %s",
                new_value, installment_number, bill_id,
            )
            raise ValidationError(f"Installment value must be a positive amount (got {new_value})")

        installment.value = new_value
        self.repository.save_all(bills)
        logger.info(
            "Set installment %d of bill %s to %.2f", installment_number, bill_id, new_value
        )
        return bill

    def pay_installment(
        self,
        bill_id: str,
        installment_number: int,
        payment_date: Optional[date] = None,
    ) -> Bill:
        """
        Mark one installment as paid.

        Paying an already paid installment overwrites its payment date.

        Args:
            bill_id: ID of the bill
            installment_number: Installment to pay (1-indexed)
            payment_date: Date of payment (defaults to today)

        Raises:
            NotFoundError: if the bill or installment does not exist
            ValidationError: if ``payment_date`` is in the future
        """
        paid_on = self._payment_date(payment_date)
        bills = self.repository.load()
        bill = self._find(bills, bill_id)
        installment = self._find_installment(bill, installment_number)

        installment.mark_paid(paid_on)
        self.repository.save_all(bills)
        logger.info(
            "Paid installment %d of bill %s on %s (bill %s)",
            installment_number, bill_id, paid_on, bill.status.value,
        )
        return bill

    def pay_all_remaining(self, bill_id: str, payment_date: Optional[date] = None) -> Bill:
        """
        Mark every pending installment as paid on the same date.

        Installments already paid keep their payment date. Succeeds without
        changes if nothing is pending.

        Raises:
            NotFoundError: if the bill does not exist
            ValidationError: if ``payment_date`` is in the future
        """
        paid_on = self._payment_date(payment_date)
        bills = self.repository.load()
        bill = self._find(bills, bill_id)

        pending = [inst for inst in bill.installments if inst.status == PaymentStatus.PENDING]
        for inst in pending:
            inst.mark_paid(paid_on)

        self.repository.save_all(bills)
        logger.info("Paid %d remaining installment(s) of bill %s on %s", len(pending), bill_id, paid_on)
        return bill

    def delete_bill(self, bill_id: str) -> None:
        """
        Delete a bill.

        Raises:
            NotFoundError: if the bill does not exist
        """
        bills = self.repository.load()
        bill = self._find(bills, bill_id)
        self.repository.save_all([b for b in bills if b.id != bill.id])
        logger.info("Deleted bill %s (#%s)", bill.id, bill.number)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find(self, bills: list[Bill], bill_id: str) -> Bill:
        for bill in bills:
            if bill.id == bill_id:
                return bill
        logger.warning("Bill %s not found", bill_id)
        raise NotFoundError(f"Bill {bill_id} not found")

    def _find_installment(self, bill: Bill, number: int):
        installment = bill.get_installment(number)
        if installment is None:
            logger.warning("Installment %s not found in bill %s", number, bill.id)
            raise NotFoundError(
                f"Bill {bill.id} has no installment {number} "
                f"(1..{bill.total_installments})"
            )
        return installment

    def _payment_date(self, payment_date: Optional[date]) -> date:
        today = self.clock.now()
        if payment_date is None:
            return today
        if payment_date > today:
            logger.warning("Rejected future payment date %s", payment_date)
            raise ValidationError(f"Payment date {payment_date} is in the future")
        return payment_date
