"""External collaborators: e-invoicing submission and clinical summaries."""

from .e_invoicing import (
    EInvoiceReceipt,
    EInvoicingClient,
    EInvoicingError,
    FactusClient,
    SimulatedEInvoicingClient,
    build_payload,
    get_e_invoicing_client,
)
from .invoice_submission import (
    InvoiceSubmissionWorkflow,
    InvoiceSubmitEvent,
    StatusEvent,
    SubmissionOutcome,
)

__all__ = [
    "EInvoiceReceipt",
    "EInvoicingClient",
    "EInvoicingError",
    "FactusClient",
    "SimulatedEInvoicingClient",
    "build_payload",
    "get_e_invoicing_client",
    "InvoiceSubmissionWorkflow",
    "InvoiceSubmitEvent",
    "StatusEvent",
    "SubmissionOutcome",
]
