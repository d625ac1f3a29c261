"""Invoice totals and payment recording."""

import logging
import uuid
from datetime import date

from pydantic import BaseModel

from ..schemas.common import PaymentMethod, ServiceItem, ValidationResult
from ..schemas.invoice import Invoice, InvoiceLineItem, InvoiceStatus

logger = logging.getLogger(__name__)

TOLERANCE = 0.01


class DraftLine(BaseModel):
    """A line as entered on the invoice form, before pricing."""

    service_id: str | None = None
    quantity: int = 1
    price: float | None = None
    description: str | None = None
    provider_id: str | None = None


def invoice_subtotal(lines: list[DraftLine], services: list[ServiceItem]) -> float:
    """Sum of unit price times quantity, using catalog prices when unset."""
    services_by_id = {s.id: s for s in services}
    return sum(_unit_price(line, services_by_id) * line.quantity for line in lines)


def build_invoice(
    patient_id: str | None,
    lines: list[DraftLine],
    services: list[ServiceItem],
    discount: float = 0.0,
    today: date | None = None,
    notes: str | None = None,
) -> Invoice | ValidationResult:
    """Price the drafted lines and produce a new pending invoice.

    Unit prices default to the catalog base price of the selected service.
    The invoice amount is the subtotal minus the discount.
    """
    if not patient_id:
        return ValidationResult(
            check_name="patient_required",
            detail="No patient selected for the invoice",
            recommendation="Select the patient who received the services",
        )
    if not lines:
        return ValidationResult(
            check_name="items_required",
            detail="An invoice needs at least one service line",
        )
    if discount < 0:
        return ValidationResult(
            check_name="negative_discount",
            detail=f"Discount cannot be negative (got ${discount:.2f})",
        )
    for line in lines:
        if line.quantity < 1:
            return ValidationResult(
                check_name="invalid_quantity",
                detail=f"Line quantity must be at least 1 (got {line.quantity})",
            )

    services_by_id = {s.id: s for s in services}
    items: list[InvoiceLineItem] = []
    for line in lines:
        unit_price = _unit_price(line, services_by_id)
        service = services_by_id.get(line.service_id) if line.service_id else None
        items.append(
            InvoiceLineItem(
                description=line.description or (service.name if service else ""),
                price=unit_price * line.quantity,
                service_id=line.service_id,
                quantity=line.quantity,
                provider_id=line.provider_id,
            )
        )

    subtotal = sum(item.price for item in items)
    if discount > subtotal + TOLERANCE:
        return ValidationResult(
            check_name="discount_exceeds_subtotal",
            detail=f"Discount ${discount:.2f} is larger than the subtotal ${subtotal:.2f}",
        )

    return Invoice(
        id=str(uuid.uuid4())[:8],
        patient_id=patient_id,
        date=today or date.today(),
        amount=max(subtotal - discount, 0.0),
        items=items,
        discount=discount,
        notes=notes,
    )


def record_invoice_payment(
    invoice: Invoice,
    amount: float,
    method: PaymentMethod | None = None,
) -> Invoice | ValidationResult:
    """Apply a payment to an invoice, moving it to partially paid or paid."""
    if amount <= 0:
        return ValidationResult(
            check_name="invalid_payment_amount",
            detail=f"Payment amount must be positive (got ${amount:.2f})",
        )
    if not invoice.is_open:
        return ValidationResult(
            check_name="invoice_not_open",
            detail=f"Invoice {invoice.id} has status {invoice.status.value} and accepts no payments",
        )
    if amount > invoice.remaining + TOLERANCE:
        return ValidationResult(
            check_name="overpayment",
            detail=f"Payment ${amount:.2f} exceeds remaining balance ${invoice.remaining:.2f} on invoice {invoice.id}",
            recommendation="Record the exact remaining balance",
        )

    paid_amount = min(invoice.paid_amount + amount, invoice.amount)
    fully_paid = invoice.amount - paid_amount <= TOLERANCE
    if fully_paid:
        paid_amount = invoice.amount

    logger.debug("Recorded payment of %.2f on invoice %s", amount, invoice.id)
    return invoice.model_copy(
        update={
            "paid_amount": paid_amount,
            "status": InvoiceStatus.PAID if fully_paid else InvoiceStatus.PARTIALLY_PAID,
            "payment_method": method or invoice.payment_method,
        }
    )


def _unit_price(line: DraftLine, services_by_id: dict[str, ServiceItem]) -> float:
    if line.price is not None:
        return line.price
    service = services_by_id.get(line.service_id) if line.service_id else None
    return service.base_price if service else 0.0
