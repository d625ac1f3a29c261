"""Pure billing calculators: receivables, payment plans and commissions."""

from datetime import datetime

from ..config import DEFAULT_COMMISSION_RATE, OVERDUE_AFTER_DAYS
from ..schemas.commission import BillingSummary
from ..schemas.common import Patient, Provider, ServiceItem
from ..schemas.invoice import Invoice
from .commissions import (
    AttributionMode,
    available_periods,
    commission_csv_filename,
    commission_to_csv,
    compute_commissions,
    current_period,
    total_commissions,
    update_commission_status,
)
from .invoices import DraftLine, build_invoice, record_invoice_payment
from .payment_plans import (
    INSTALLMENT_OPTIONS,
    create_payment_plan,
    plan_progress,
    record_installment_payment,
    refresh_installment_statuses,
)
from .receivables import compute_receivables, summarize_receivables

__all__ = [
    "summarize_billing",
    "compute_receivables",
    "summarize_receivables",
    "create_payment_plan",
    "record_installment_payment",
    "refresh_installment_statuses",
    "plan_progress",
    "INSTALLMENT_OPTIONS",
    "AttributionMode",
    "compute_commissions",
    "available_periods",
    "current_period",
    "update_commission_status",
    "commission_to_csv",
    "commission_csv_filename",
    "total_commissions",
    "DraftLine",
    "build_invoice",
    "record_invoice_payment",
]


def summarize_billing(
    period: str,
    providers: list[Provider],
    invoices: list[Invoice],
    services: list[ServiceItem],
    patients: list[Patient],
    now: datetime | None = None,
    attribution: AttributionMode = AttributionMode.ALL_PROVIDERS,
    overdue_after_days: int = OVERDUE_AFTER_DAYS,
    default_rate: float = DEFAULT_COMMISSION_RATE,
) -> BillingSummary:
    """Dashboard totals for receivables as of ``now`` and commissions for ``period``."""
    receivables = summarize_receivables(
        compute_receivables(invoices, patients, now, overdue_after_days)
    )
    commissions = compute_commissions(
        period,
        providers,
        invoices,
        services,
        patients,
        attribution=attribution,
        default_rate=default_rate,
    )
    return BillingSummary(
        period=period,
        total_receivable=receivables["total_receivable"],
        total_overdue=receivables["total_overdue"],
        patients_with_debt=receivables["patients_with_debt"],
        total_commissions=total_commissions(commissions),
    )
