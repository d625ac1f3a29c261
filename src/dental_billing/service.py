"""Billing service wiring repositories into the pure calculators."""

import logging
from datetime import date, datetime

from .calculators import (
    AttributionMode,
    compute_commissions,
    compute_receivables,
    create_payment_plan,
    record_installment_payment,
    record_invoice_payment,
    summarize_billing,
)
from .config import BillingConfig
from .repositories import (
    InvoiceRepository,
    PatientRepository,
    PaymentPlanRepository,
    ProviderRepository,
    ServiceRepository,
)
from .schemas import (
    AccountReceivable,
    BillingSummary,
    Commission,
    PaymentMethod,
    PaymentPlan,
    UserRole,
    ValidationResult,
)

logger = logging.getLogger(__name__)


class BillingService:
    """Entry point for the hosting application.

    Reads go through the repositories on every call; nothing is cached.
    Writes happen only after the calculators report success.
    """

    def __init__(
        self,
        patients: PatientRepository,
        invoices: InvoiceRepository,
        providers: ProviderRepository,
        services: ServiceRepository,
        plans: PaymentPlanRepository,
        config: BillingConfig | None = None,
    ) -> None:
        self.patients = patients
        self.invoices = invoices
        self.providers = providers
        self.services = services
        self.plans = plans
        self.config = config or BillingConfig()

    def receivables(self, now: datetime | None = None) -> list[AccountReceivable]:
        return compute_receivables(
            self.invoices.list(),
            self.patients.list(),
            now,
            overdue_after_days=self.config.receivables.overdue_after_days,
        )

    def create_plan_for_invoice(
        self,
        invoice_id: str | None,
        down_payment: float,
        installment_count: int,
        interest_rate: float = 0.0,
        now: datetime | None = None,
        method: PaymentMethod | None = None,
    ) -> PaymentPlan | ValidationResult:
        """Create and store a plan for an invoice looked up by id.

        A non-zero down payment is recorded on the invoice as a payment in
        the same call, so the invoice balance equals the financed amount.
        """
        invoice = self.invoices.get(invoice_id) if invoice_id else None
        if invoice_id and invoice is None:
            return ValidationResult(
                check_name="invoice_not_found",
                detail=f"Invoice {invoice_id} does not exist",
            )

        allowed = self.config.payment_plans.installment_options
        if allowed and installment_count not in allowed:
            return ValidationResult(
                check_name="unsupported_installment_count",
                detail=f"{installment_count} installments is not offered; choose one of {allowed}",
            )

        result = create_payment_plan(
            invoice,
            down_payment,
            installment_count,
            interest_rate,
            now,
            interval_days=self.config.payment_plans.installment_interval_days,
        )
        if isinstance(result, ValidationResult):
            return result

        paid_invoice = None
        if result.down_payment > 0:
            paid_invoice = record_invoice_payment(invoice, result.down_payment, method)
            if isinstance(paid_invoice, ValidationResult):
                return paid_invoice

        self.plans.add(result)
        if paid_invoice is not None:
            self.invoices.update(paid_invoice)
        logger.info(
            "Stored payment plan %s for invoice %s (down payment %.2f)",
            result.id,
            result.invoice_id,
            result.down_payment,
        )
        return result

    def pay_installment(
        self,
        plan_id: str,
        installment_id: str,
        paid_on: date | None = None,
        method: PaymentMethod | None = None,
    ) -> PaymentPlan | ValidationResult:
        """Mark an installment paid and credit its amount to the source invoice.

        The invoice credit is capped at the invoice's remaining balance since
        installments include interest. Paying the last outstanding installment
        settles whatever balance is left.
        """
        plan = self.plans.get(plan_id)
        if plan is None:
            return ValidationResult(
                check_name="plan_not_found",
                detail=f"Payment plan {plan_id} does not exist",
            )

        updated = record_installment_payment(plan, installment_id, paid_on, method)
        if isinstance(updated, ValidationResult):
            return updated

        invoice = self.invoices.get(plan.invoice_id)
        installment = next(i for i in updated.installments if i.id == installment_id)
        if invoice is not None and invoice.is_open and invoice.remaining > 0:
            if updated.outstanding_amount > 0:
                credit = min(installment.amount, invoice.remaining)
            else:
                credit = invoice.remaining
            paid_invoice = record_invoice_payment(invoice, credit, method)
            if isinstance(paid_invoice, ValidationResult):
                return paid_invoice
            self.invoices.update(paid_invoice)
        elif invoice is None:
            logger.debug("Plan %s references missing invoice %s", plan.id, plan.invoice_id)

        self.plans.update(updated)
        return updated

    def commissions(
        self,
        period: str,
        attribution: AttributionMode = AttributionMode.ALL_PROVIDERS,
    ) -> list[Commission]:
        return compute_commissions(
            period,
            self._eligible_providers(),
            self.invoices.list(),
            self.services.list(),
            self.patients.list(),
            attribution=attribution,
            default_rate=self.config.commissions.default_rate,
        )

    def summary(
        self,
        period: str,
        now: datetime | None = None,
        attribution: AttributionMode = AttributionMode.ALL_PROVIDERS,
    ) -> BillingSummary:
        return summarize_billing(
            period,
            self._eligible_providers(),
            self.invoices.list(),
            self.services.list(),
            self.patients.list(),
            now=now,
            attribution=attribution,
            overdue_after_days=self.config.receivables.overdue_after_days,
            default_rate=self.config.commissions.default_rate,
        )

    def _eligible_providers(self):
        roles = {UserRole(r) for r in self.config.commissions.eligible_roles}
        return [p for p in self.providers.list() if p.role in roles]
