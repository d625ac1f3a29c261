"""Installment plan generation and lifecycle for financed invoice balances."""

import logging
import uuid
from datetime import date, datetime, timedelta

from ..config import INSTALLMENT_INTERVAL_DAYS, INSTALLMENT_OPTIONS
from ..schemas.common import (
    PaymentMethod,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
)
from ..schemas.invoice import Invoice
from ..schemas.payment_plan import Installment, InstallmentStatus, PaymentPlan

logger = logging.getLogger(__name__)

__all__ = [
    "INSTALLMENT_OPTIONS",
    "create_payment_plan",
    "record_installment_payment",
    "refresh_installment_statuses",
    "plan_progress",
]


def create_payment_plan(
    invoice: Invoice | None,
    down_payment: float,
    installment_count: int,
    interest_rate: float = 0.0,
    now: datetime | None = None,
    interval_days: int = INSTALLMENT_INTERVAL_DAYS,
) -> PaymentPlan | ValidationResult:
    """Split the open balance of an invoice into equal installments.

    The financed amount (remaining balance minus down payment) gets one flat
    application of ``interest_rate`` percent and is divided evenly across
    ``installment_count``. Installment ``n`` falls due ``n * interval_days``
    after ``now``.

    Returns a ``ValidationResult`` instead of a plan when the request cannot
    be honored. The source invoice is never modified.
    """
    now = now or datetime.now()

    failure = _validate_plan_request(invoice, down_payment, installment_count, interest_rate)
    if failure is not None:
        return failure

    remaining = invoice.remaining
    to_finance = remaining - down_payment
    if to_finance <= 0:
        return ValidationResult(
            check_name="nothing_to_finance",
            detail=f"Invoice {invoice.id}: down payment ${down_payment:.2f} leaves no balance to finance (remaining ${remaining:.2f})",
            recommendation="Record the down payment as a regular payment instead",
        )

    total_with_interest = to_finance * (1 + interest_rate / 100)
    per_installment = total_with_interest / installment_count
    start = now.date()

    installments = [
        Installment(
            id=str(uuid.uuid4())[:8],
            number=n,
            amount=per_installment,
            due_date=start + timedelta(days=n * interval_days),
        )
        for n in range(1, installment_count + 1)
    ]

    plan = PaymentPlan(
        id=str(uuid.uuid4())[:8],
        invoice_id=invoice.id,
        patient_id=invoice.patient_id,
        invoice_amount=invoice.amount,
        financed_amount=to_finance,
        total_with_interest=total_with_interest,
        down_payment=down_payment,
        interest_rate=interest_rate,
        installments=installments,
        created_at=now,
    )
    logger.debug(
        "Created plan %s for invoice %s: %d x %.2f",
        plan.id,
        invoice.id,
        installment_count,
        per_installment,
    )
    return plan


def _validate_plan_request(
    invoice: Invoice | None,
    down_payment: float,
    installment_count: int,
    interest_rate: float,
) -> ValidationResult | None:
    """Check the plan request parameters; None means the request is valid."""
    if invoice is None:
        return ValidationResult(
            check_name="invoice_required",
            detail="No invoice selected for the payment plan",
            recommendation="Select an unpaid invoice to finance",
        )

    if not invoice.is_open:
        return ValidationResult(
            check_name="invoice_not_open",
            detail=f"Invoice {invoice.id} has status {invoice.status.value} and cannot be financed",
        )

    if down_payment < 0:
        return ValidationResult(
            check_name="negative_down_payment",
            detail=f"Down payment cannot be negative (got ${down_payment:.2f})",
        )

    if down_payment > invoice.remaining:
        return ValidationResult(
            check_name="down_payment_exceeds_balance",
            detail=f"Down payment ${down_payment:.2f} exceeds remaining balance ${invoice.remaining:.2f}",
        )

    if installment_count < 1:
        return ValidationResult(
            check_name="invalid_installment_count",
            detail=f"Installment count must be a positive integer (got {installment_count})",
        )

    if interest_rate < 0:
        return ValidationResult(
            check_name="negative_interest_rate",
            detail=f"Interest rate cannot be negative (got {interest_rate}%)",
        )

    return None


def record_installment_payment(
    plan: PaymentPlan,
    installment_id: str,
    paid_on: date | None = None,
    method: PaymentMethod | None = None,
) -> PaymentPlan | ValidationResult:
    """Mark one installment as paid, returning an updated copy of the plan."""
    paid_on = paid_on or date.today()
    target = next((i for i in plan.installments if i.id == installment_id), None)

    if target is None:
        return ValidationResult(
            check_name="installment_not_found",
            detail=f"Plan {plan.id} has no installment {installment_id}",
        )
    if target.status == InstallmentStatus.PAID:
        return ValidationResult(
            check_name="installment_already_paid",
            status=ValidationStatus.WARNING,
            severity=ValidationSeverity.LOW,
            detail=f"Installment {target.number} of plan {plan.id} was already paid on {target.paid_date}",
        )

    installments = [
        i.model_copy(
            update={
                "status": InstallmentStatus.PAID,
                "paid_date": paid_on,
                "payment_method": method,
            }
        )
        if i.id == installment_id
        else i
        for i in plan.installments
    ]
    return plan.model_copy(update={"installments": installments})


def refresh_installment_statuses(plan: PaymentPlan, today: date | None = None) -> PaymentPlan:
    """Flag pending installments whose due date has passed as overdue."""
    today = today or date.today()
    installments = [
        i.model_copy(update={"status": InstallmentStatus.OVERDUE})
        if i.status == InstallmentStatus.PENDING and i.due_date < today
        else i
        for i in plan.installments
    ]
    return plan.model_copy(update={"installments": installments})


def plan_progress(plan: PaymentPlan) -> dict[str, float]:
    """Paid/total installment counts and the balance still owed."""
    total = len(plan.installments)
    paid = len(plan.paid_installments)
    return {
        "paid_installments": paid,
        "total_installments": total,
        "percent_complete": (paid / total * 100) if total else 0.0,
        "outstanding_amount": plan.outstanding_amount,
    }
