"""Payment plan schema for financed invoice balances."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel

from .common import PaymentMethod


class InstallmentStatus(str, Enum):
    """Status of a scheduled installment."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class Installment(BaseModel):
    """One scheduled partial payment within a plan."""

    id: str
    number: int
    amount: float
    due_date: date
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_date: date | None = None
    payment_method: PaymentMethod | None = None


class PaymentPlan(BaseModel):
    """Installment schedule financing the open balance of one invoice."""

    id: str
    invoice_id: str
    patient_id: str
    # Full invoice amount at the time the plan was created
    invoice_amount: float
    # Remaining balance minus the down payment
    financed_amount: float
    total_with_interest: float
    down_payment: float = 0.0
    # Monthly simple interest, as a percentage
    interest_rate: float = 0.0
    installments: list[Installment] = []
    created_at: datetime

    @property
    def paid_installments(self) -> list[Installment]:
        return [i for i in self.installments if i.status == InstallmentStatus.PAID]

    @property
    def outstanding_amount(self) -> float:
        return sum(
            i.amount for i in self.installments if i.status != InstallmentStatus.PAID
        )
