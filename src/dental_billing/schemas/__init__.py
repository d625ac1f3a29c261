"""Dental clinic billing schemas."""

from .clinical import ClinicalEntry, ClinicalSummary, ClinicalSummaryResult
from .commission import BillingSummary, Commission, CommissionEntry, CommissionStatus
from .common import (
    Patient,
    PaymentMethod,
    Provider,
    ServiceItem,
    UserRole,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
)
from .invoice import (
    OPEN_STATUSES,
    SETTLED_STATUSES,
    Invoice,
    InvoiceLineItem,
    InvoiceStatus,
)
from .payment_plan import Installment, InstallmentStatus, PaymentPlan
from .receivables import AccountReceivable, ReceivableInvoice

__all__ = [
    # Common
    "UserRole",
    "PaymentMethod",
    "Patient",
    "Provider",
    "ServiceItem",
    "ValidationSeverity",
    "ValidationStatus",
    "ValidationResult",
    # Invoices
    "InvoiceStatus",
    "InvoiceLineItem",
    "Invoice",
    "OPEN_STATUSES",
    "SETTLED_STATUSES",
    # Payment plans
    "InstallmentStatus",
    "Installment",
    "PaymentPlan",
    # Receivables
    "ReceivableInvoice",
    "AccountReceivable",
    # Commissions
    "CommissionStatus",
    "CommissionEntry",
    "Commission",
    "BillingSummary",
    # Clinical
    "ClinicalEntry",
    "ClinicalSummary",
    "ClinicalSummaryResult",
]
