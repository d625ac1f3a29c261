"""Local-first invoice submission workflow.

A 2-step pipeline that:
1. Commits the invoice to the local repository
2. Submits it to the e-invoicing authority and records the returned code

The local invoice stays committed whatever the authority answers; failures
are reported to the caller as a warning, never raised.
"""

import logging
from typing import Annotated, Literal

from pydantic import BaseModel
from workflows import Context, Workflow, step
from workflows.events import Event, StartEvent, StopEvent
from workflows.resource import ResourceConfig

from ..config import CONFIG_FILE, EInvoicingSettings
from ..repositories import InvoiceRepository, PatientRepository
from ..schemas import Invoice, InvoiceStatus
from .e_invoicing import EInvoicingClient, EInvoicingError, get_e_invoicing_client

logger = logging.getLogger(__name__)


# --- Events ---


class InvoiceSubmitEvent(StartEvent):
    """Start event carrying the invoice to commit and submit."""

    invoice: Invoice


class StatusEvent(Event):
    """Progress status update for the client."""

    message: str
    level: Literal["info", "warning", "error"] = "info"


class InvoiceCommittedEvent(Event):
    """Emitted once the invoice is stored locally."""

    pass


# --- Workflow State ---


class SubmissionState(BaseModel):
    """State persisted across workflow steps."""

    invoice_id: str = ""
    patient_id: str = ""
    electronic_invoice_code: str | None = None
    error: str | None = None


class SubmissionOutcome(BaseModel):
    """Final result handed back to the caller."""

    invoice_id: str
    status: Literal["submitted", "local_only"]
    electronic_invoice_code: str | None = None
    error: str | None = None


# --- Workflow ---


class InvoiceSubmissionWorkflow(Workflow):
    """Store an invoice, then send it to the electronic invoicing authority."""

    def __init__(
        self,
        invoices: InvoiceRepository,
        patients: PatientRepository,
        client: EInvoicingClient | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.invoices = invoices
        self.patients = patients
        self.client = client

    @step()
    async def commit_invoice(
        self,
        event: InvoiceSubmitEvent,
        ctx: Context[SubmissionState],
    ) -> InvoiceCommittedEvent:
        """Persist the invoice locally before any external call."""
        invoice = event.invoice

        if self.invoices.get(invoice.id) is None:
            self.invoices.add(invoice)
            logger.info("Committed invoice %s locally", invoice.id)

        async with ctx.store.edit_state() as state:
            state.invoice_id = invoice.id
            state.patient_id = invoice.patient_id

        ctx.write_event_to_stream(
            StatusEvent(message=f"Invoice {invoice.id} saved, contacting e-invoicing...")
        )
        return InvoiceCommittedEvent()

    @step()
    async def submit_invoice(
        self,
        event: InvoiceCommittedEvent,
        ctx: Context[SubmissionState],
        e_invoicing_config: Annotated[
            EInvoicingSettings,
            ResourceConfig(
                config_file=CONFIG_FILE,
                path_selector="e_invoicing",
                label="E-Invoicing Settings",
                description="Endpoint, timeout and simulation switch for Factus",
            ),
        ],
    ) -> StopEvent:
        """Send the committed invoice and record the authority's code."""
        state = await ctx.store.get_state()
        invoice = self.invoices.get(state.invoice_id)
        patient = self.patients.get(state.patient_id)

        if invoice is None:
            # Should not happen: commit_invoice stored it
            raise KeyError(f"Unknown invoice '{state.invoice_id}'")

        client = self.client or get_e_invoicing_client(e_invoicing_config)

        try:
            receipt = await client.submit(invoice, patient)
        except EInvoicingError as e:
            logger.warning("E-invoicing failed for invoice %s: %s", invoice.id, e)
            async with ctx.store.edit_state() as state:
                state.error = str(e)
            ctx.write_event_to_stream(
                StatusEvent(
                    message=f"Invoice {invoice.id} saved locally. E-invoicing error: {e}",
                    level="warning",
                )
            )
            outcome = SubmissionOutcome(
                invoice_id=invoice.id, status="local_only", error=str(e)
            )
            return StopEvent(result=outcome)

        self.invoices.update(
            invoice.model_copy(
                update={
                    "status": InvoiceStatus.E_INVOICE_SUBMITTED,
                    "electronic_invoice_code": receipt.electronic_invoice_code,
                }
            )
        )
        async with ctx.store.edit_state() as state:
            state.electronic_invoice_code = receipt.electronic_invoice_code

        ctx.write_event_to_stream(
            StatusEvent(
                message=f"Invoice {invoice.id} accepted with code {receipt.electronic_invoice_code}"
            )
        )
        return StopEvent(
            result=SubmissionOutcome(
                invoice_id=invoice.id,
                status="submitted",
                electronic_invoice_code=receipt.electronic_invoice_code,
            )
        )
