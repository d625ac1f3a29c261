"""Commission schemas for provider settlements."""

from datetime import date
from enum import Enum

from pydantic import BaseModel


class CommissionStatus(str, Enum):
    """Settlement status of a provider's commission for a period."""

    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"


class CommissionEntry(BaseModel):
    """Commission earned on one billed line item."""

    id: str
    service_id: str
    service_name: str
    patient_id: str
    patient_name: str
    date: date
    base_price: float
    commission_rate: float
    amount: float


class Commission(BaseModel):
    """Per-provider, per-period commission aggregate."""

    id: str
    provider_id: str
    period: str  # YYYY-MM
    services: list[CommissionEntry] = []
    total_commission: float = 0.0
    base_salary: float = 0.0
    total_paid: float = 0.0
    status: CommissionStatus = CommissionStatus.PENDING
    paid_date: date | None = None


class BillingSummary(BaseModel):
    """Dashboard totals across receivables and commissions."""

    period: str | None = None
    total_receivable: float = 0.0
    total_overdue: float = 0.0
    patients_with_debt: int = 0
    total_commissions: float = 0.0
