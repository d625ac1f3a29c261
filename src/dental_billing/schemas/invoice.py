"""Invoice schema for billed clinical services."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, model_validator

from .common import PaymentMethod


class InvoiceStatus(str, Enum):
    """Lifecycle of an invoice."""

    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    # Submitted to the electronic invoicing authority
    E_INVOICE_SUBMITTED = "factus_submitted"


OPEN_STATUSES = frozenset({InvoiceStatus.PENDING, InvoiceStatus.PARTIALLY_PAID})
SETTLED_STATUSES = frozenset({InvoiceStatus.PAID, InvoiceStatus.E_INVOICE_SUBMITTED})


class InvoiceLineItem(BaseModel):
    """Individual charge line on an invoice."""

    description: str
    price: float
    service_id: str | None = None
    quantity: int = 1
    # Performing provider, when the clinic tracks it
    provider_id: str | None = None


class Invoice(BaseModel):
    """Billable record for services rendered to a patient."""

    id: str
    patient_id: str
    date: date
    amount: float
    paid_amount: float = 0.0
    status: InvoiceStatus = InvoiceStatus.PENDING
    items: list[InvoiceLineItem] = []
    electronic_invoice_code: str | None = None
    payment_method: PaymentMethod | None = None
    discount: float = 0.0
    notes: str | None = None

    @model_validator(mode="after")
    def _check_paid_amount(self) -> "Invoice":
        if self.paid_amount < 0:
            raise ValueError("paid_amount cannot be negative")
        if self.paid_amount > self.amount:
            raise ValueError(
                f"paid_amount {self.paid_amount:.2f} exceeds invoice amount {self.amount:.2f}"
            )
        return self

    @property
    def remaining(self) -> float:
        """Outstanding balance still owed on the invoice."""
        return self.amount - (self.paid_amount or 0)

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES
