"""Derived per-patient receivable aggregates."""

from datetime import date

from pydantic import BaseModel

from .invoice import InvoiceStatus


class ReceivableInvoice(BaseModel):
    """An open invoice contributing to a patient's debt."""

    invoice_id: str
    amount: float
    status: InvoiceStatus


class AccountReceivable(BaseModel):
    """Money owed by one patient across unpaid and partially paid invoices."""

    patient_id: str
    patient_name: str
    total_debt: float = 0.0
    overdue_debt: float = 0.0
    next_payment_due: date | None = None
    invoices: list[ReceivableInvoice] = []
