"""Billing, receivables and commission core for a dental clinic dashboard."""

from .calculators import (
    AttributionMode,
    compute_commissions,
    compute_receivables,
    create_payment_plan,
    summarize_billing,
)
from .service import BillingService

__all__ = [
    "AttributionMode",
    "BillingService",
    "compute_commissions",
    "compute_receivables",
    "create_payment_plan",
    "summarize_billing",
]
