"""Provider commission calculation for a billing period."""

import csv
import io
import logging
import uuid
from datetime import date, datetime
from enum import Enum

from ..config import DEFAULT_COMMISSION_RATE
from ..schemas.commission import Commission, CommissionEntry, CommissionStatus
from ..schemas.common import (
    Patient,
    Provider,
    ServiceItem,
    UserRole,
    ValidationResult,
)
from ..schemas.invoice import SETTLED_STATUSES, Invoice, InvoiceLineItem

logger = logging.getLogger(__name__)

ELIGIBLE_ROLES = frozenset({UserRole.DENTIST, UserRole.ADMIN})
UNKNOWN_SERVICE_ID = "unknown"
UNKNOWN_PATIENT_NAME = "Unknown"

_STATUS_ORDER = {
    CommissionStatus.PENDING: 0,
    CommissionStatus.PROCESSING: 1,
    CommissionStatus.PAID: 2,
}


class AttributionMode(str, Enum):
    """How qualifying invoice lines are attributed to providers."""

    # Every qualifying line counts for every eligible provider
    ALL_PROVIDERS = "all_providers"
    # Only lines whose provider_id names the provider count
    PERFORMING_PROVIDER = "performing_provider"


def parse_period(period: str) -> tuple[int, int]:
    """Split a ``YYYY-MM`` period key into (year, month)."""
    try:
        year_str, month_str = period.split("-")
        year, month = int(year_str), int(month_str)
    except (ValueError, AttributeError) as exc:
        raise ValueError(f"Invalid period '{period}', expected YYYY-MM") from exc
    if not 1 <= month <= 12 or len(year_str) != 4:
        raise ValueError(f"Invalid period '{period}', expected YYYY-MM")
    return year, month


def available_periods(now: date | None = None, months: int = 12) -> list[str]:
    """Period keys for the last ``months`` months, newest first."""
    now = now or date.today()
    periods: list[str] = []
    year, month = now.year, now.month
    for _ in range(months):
        periods.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return periods


def compute_commissions(
    period: str,
    providers: list[Provider],
    invoices: list[Invoice],
    services: list[ServiceItem],
    patients: list[Patient],
    attribution: AttributionMode = AttributionMode.ALL_PROVIDERS,
    default_rate: float = DEFAULT_COMMISSION_RATE,
) -> list[Commission]:
    """Compute one commission aggregate per eligible provider for a period.

    Qualifying invoices are dated within the period and have been paid or
    submitted for electronic invoicing. Each line item earns
    ``price * rate`` where the rate is the provider's own or ``default_rate``.

    With ``AttributionMode.ALL_PROVIDERS`` every qualifying line counts for
    every provider; the clinic does not record who performed each service.
    """
    year, month = parse_period(period)

    period_invoices = [
        inv
        for inv in invoices
        if inv.date.year == year
        and inv.date.month == month
        and inv.status in SETTLED_STATUSES
    ]

    services_by_id = {s.id: s for s in services}
    patients_by_id = {p.id: p for p in patients}
    commissions: list[Commission] = []

    for provider in providers:
        if provider.role not in ELIGIBLE_ROLES:
            continue

        # A rate of 0 counts as unset
        rate = provider.commission_rate or default_rate
        entries: list[CommissionEntry] = []

        for invoice in period_invoices:
            patient = patients_by_id.get(invoice.patient_id)
            if patient is None:
                logger.debug(
                    "Invoice %s references unknown patient %s",
                    invoice.id,
                    invoice.patient_id,
                )

            for index, item in enumerate(invoice.items):
                if not _is_attributed(item, provider, attribution):
                    continue
                entries.append(
                    _build_entry(
                        item, index, invoice, patient, services_by_id, provider, rate
                    )
                )

        total_commission = sum(e.amount for e in entries)
        base_salary = 0.0  # no contract data is tracked

        commissions.append(
            Commission(
                id=_stable_id(provider.id, period),
                provider_id=provider.id,
                period=period,
                services=entries,
                total_commission=total_commission,
                base_salary=base_salary,
                total_paid=total_commission + base_salary,
            )
        )

    return commissions


def _is_attributed(
    item: InvoiceLineItem, provider: Provider, attribution: AttributionMode
) -> bool:
    if attribution == AttributionMode.ALL_PROVIDERS:
        return True
    return item.provider_id == provider.id


def _build_entry(
    item: InvoiceLineItem,
    index: int,
    invoice: Invoice,
    patient: Patient | None,
    services_by_id: dict[str, ServiceItem],
    provider: Provider,
    rate: float,
) -> CommissionEntry:
    service = services_by_id.get(item.service_id) if item.service_id else None
    return CommissionEntry(
        id=_stable_id(provider.id, invoice.id, str(index)),
        service_id=item.service_id or UNKNOWN_SERVICE_ID,
        service_name=service.name if service else item.description,
        patient_id=invoice.patient_id,
        patient_name=patient.name if patient else UNKNOWN_PATIENT_NAME,
        date=invoice.date,
        base_price=item.price,
        commission_rate=rate,
        amount=item.price * rate,
    )


def _stable_id(*parts: str) -> str:
    """Deterministic short id so repeated runs yield identical output."""
    return uuid.uuid5(uuid.NAMESPACE_OID, "/".join(parts)).hex[:8]


def update_commission_status(
    commission: Commission,
    status: CommissionStatus,
    paid_on: date | None = None,
) -> Commission | ValidationResult:
    """Advance a commission settlement; moving backwards is rejected."""
    if _STATUS_ORDER[status] < _STATUS_ORDER[commission.status]:
        return ValidationResult(
            check_name="commission_status_regression",
            detail=f"Commission {commission.id} cannot move from {commission.status.value} to {status.value}",
        )
    update: dict = {"status": status}
    if status == CommissionStatus.PAID:
        update["paid_date"] = paid_on or date.today()
    return commission.model_copy(update=update)


def commission_to_csv(commission: Commission, provider_name: str) -> str:
    """Itemized commission report for download."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Commission Report"])
    writer.writerow([f"Provider: {provider_name}"])
    writer.writerow([f"Period: {commission.period}"])
    writer.writerow([f"Total Commission: ${commission.total_commission:.2f}"])
    writer.writerow([])
    writer.writerow(["Date", "Patient", "Service", "Base Price", "Rate %", "Commission"])
    for entry in commission.services:
        writer.writerow(
            [
                entry.date.isoformat(),
                entry.patient_name,
                entry.service_name,
                f"{entry.base_price:.2f}",
                f"{entry.commission_rate * 100:.0f}%",
                f"{entry.amount:.2f}",
            ]
        )
    return buffer.getvalue()


def commission_csv_filename(commission: Commission, provider_name: str) -> str:
    slug = "_".join(provider_name.split())
    return f"commissions_{slug}_{commission.period}.csv"


def total_commissions(commissions: list[Commission]) -> float:
    return sum(c.total_commission for c in commissions)


def current_period(now: datetime | date | None = None) -> str:
    now = now or date.today()
    return f"{now.year:04d}-{now.month:02d}"
