"""Clients for the electronic invoicing authority (Factus)."""

import asyncio
import logging
import random
import string
from typing import Any, Protocol

import requests
from pydantic import BaseModel

from ..config import BillingConfig, EInvoicingSettings
from ..schemas import Invoice, Patient

logger = logging.getLogger(__name__)


class EInvoicingError(Exception):
    """The e-invoicing authority rejected or could not receive an invoice."""


class EInvoiceReceipt(BaseModel):
    """Acknowledgement returned for an accepted invoice."""

    invoice_id: str
    electronic_invoice_code: str
    raw_response: dict[str, Any] = {}


class EInvoicingClient(Protocol):
    async def submit(self, invoice: Invoice, patient: Patient | None) -> EInvoiceReceipt: ...


def build_payload(invoice: Invoice, patient: Patient | None) -> dict[str, Any]:
    """Structured invoice payload in the authority's field names."""
    subtotal = sum(item.price for item in invoice.items)
    return {
        "cliente": {
            "nombre": patient.name if patient else None,
            "identificacion": patient.dni if patient else None,
            "telefono": patient.phone if patient else None,
            "email": (patient.email or "") if patient else "",
            "direccion": patient.address if patient else None,
        },
        "items": [
            {
                "descripcion": item.description,
                "cantidad": item.quantity,
                "precio_unitario": item.price / item.quantity if item.quantity else item.price,
                "subtotal": item.price,
            }
            for item in invoice.items
        ],
        "subtotal": subtotal,
        "descuento": invoice.discount,
        "total": invoice.amount,
        "notas": invoice.notes,
    }


class FactusClient:
    """HTTP client posting invoices to the Factus API."""

    def __init__(self, settings: EInvoicingSettings, api_key: str | None = None) -> None:
        self.settings = settings
        self.api_key = api_key or BillingConfig().factus_api_key

    async def submit(self, invoice: Invoice, patient: Patient | None) -> EInvoiceReceipt:
        payload = build_payload(invoice, patient)
        # requests is blocking; keep it off the event loop
        data = await asyncio.to_thread(self._post, payload)
        code = data.get("cufe") or data.get("electronic_invoice_code") or data.get("code")
        if not code:
            raise EInvoicingError(f"Factus response for invoice {invoice.id} has no invoice code")
        return EInvoiceReceipt(
            invoice_id=invoice.id,
            electronic_invoice_code=str(code),
            raw_response=data,
        )

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise EInvoicingError("FACTUS_API_KEY is not configured")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            resp = requests.post(
                self.settings.endpoint,
                json=payload,
                headers=headers,
                timeout=self.settings.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.warning("Factus request failed: %s", e)
            raise EInvoicingError(f"Factus request failed: {e}") from e

        if not resp.ok:
            raise EInvoicingError(f"Factus API error (HTTP {resp.status_code}): {resp.text}")
        try:
            return resp.json()
        except ValueError as e:
            raise EInvoicingError("Factus returned a non-JSON response") from e


class SimulatedEInvoicingClient:
    """Stand-in for demos: waits briefly, then issues a CUFE-style code."""

    def __init__(self, delay_seconds: float = 1.5, fail: bool = False) -> None:
        self.delay_seconds = delay_seconds
        self.fail = fail
        self.submitted: list[str] = []

    async def submit(self, invoice: Invoice, patient: Patient | None) -> EInvoiceReceipt:
        await asyncio.sleep(self.delay_seconds)
        if self.fail:
            raise EInvoicingError("Simulated e-invoicing outage")
        self.submitted.append(invoice.id)
        suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=8))
        return EInvoiceReceipt(
            invoice_id=invoice.id,
            electronic_invoice_code=f"CUFE-{suffix}",
        )


def get_e_invoicing_client(settings: EInvoicingSettings) -> EInvoicingClient:
    """Real client unless the settings ask for the simulation."""
    if settings.simulate:
        return SimulatedEInvoicingClient(delay_seconds=settings.simulated_delay_seconds)
    return FactusClient(settings)
