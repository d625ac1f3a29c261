"""Accounts-receivable aggregation across open invoices."""

import logging
from datetime import date, datetime, time, timedelta

from ..config import OVERDUE_AFTER_DAYS
from ..schemas.common import Patient
from ..schemas.invoice import Invoice
from ..schemas.receivables import AccountReceivable, ReceivableInvoice

logger = logging.getLogger(__name__)


def compute_receivables(
    invoices: list[Invoice],
    patients: list[Patient],
    now: datetime | None = None,
    overdue_after_days: int = OVERDUE_AFTER_DAYS,
) -> list[AccountReceivable]:
    """Aggregate outstanding balances per patient.

    Only ``pending`` and ``partially_paid`` invoices count. Invoices whose
    patient cannot be resolved are skipped. An invoice is overdue when its
    date lies more than ``overdue_after_days`` before ``now``.

    Results are sorted by total debt, largest first.
    """
    now = _as_datetime(now or datetime.now())
    cutoff = now - timedelta(days=overdue_after_days)
    patients_by_id = {p.id: p for p in patients}
    accounts: dict[str, AccountReceivable] = {}

    for invoice in invoices:
        if not invoice.is_open:
            continue

        patient = patients_by_id.get(invoice.patient_id)
        if patient is None:
            logger.debug(
                "Skipping invoice %s: patient %s not found",
                invoice.id,
                invoice.patient_id,
            )
            continue

        remaining = invoice.remaining
        if remaining <= 0:
            continue

        account = accounts.get(patient.id)
        if account is None:
            account = AccountReceivable(
                patient_id=patient.id,
                patient_name=patient.name,
                next_payment_due=invoice.date,
            )
            accounts[patient.id] = account

        account.total_debt += remaining
        if _as_datetime(invoice.date) < cutoff:
            account.overdue_debt += remaining
        if account.next_payment_due is None or invoice.date < account.next_payment_due:
            account.next_payment_due = invoice.date
        account.invoices.append(
            ReceivableInvoice(
                invoice_id=invoice.id,
                amount=remaining,
                status=invoice.status,
            )
        )

    return sorted(accounts.values(), key=lambda a: a.total_debt, reverse=True)


def summarize_receivables(accounts: list[AccountReceivable]) -> dict[str, float]:
    """Totals shown on the receivables dashboard."""
    return {
        "total_receivable": sum(a.total_debt for a in accounts),
        "total_overdue": sum(a.overdue_debt for a in accounts),
        "patients_with_debt": len(accounts),
    }


def _as_datetime(value: date | datetime) -> datetime:
    """Normalize dates to naive datetimes for comparison."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)
