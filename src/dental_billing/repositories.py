"""Repository interfaces for billing records, with in-memory implementations."""

import logging
from typing import Protocol

from .schemas import Invoice, Patient, PaymentPlan, Provider, ServiceItem

logger = logging.getLogger(__name__)


class PatientRepository(Protocol):
    def list(self) -> list[Patient]: ...

    def get(self, patient_id: str) -> Patient | None: ...


class ProviderRepository(Protocol):
    def list(self) -> list[Provider]: ...

    def get(self, provider_id: str) -> Provider | None: ...


class ServiceRepository(Protocol):
    def list(self) -> list[ServiceItem]: ...


class InvoiceRepository(Protocol):
    """Invoices are added and updated, never deleted."""

    def list(self) -> list[Invoice]: ...

    def get(self, invoice_id: str) -> Invoice | None: ...

    def add(self, invoice: Invoice) -> None: ...

    def update(self, invoice: Invoice) -> None: ...


class PaymentPlanRepository(Protocol):
    def list(self, patient_id: str | None = None) -> list[PaymentPlan]: ...

    def get(self, plan_id: str) -> PaymentPlan | None: ...

    def add(self, plan: PaymentPlan) -> None: ...

    def update(self, plan: PaymentPlan) -> None: ...


class _InMemoryStore:
    """Insertion-ordered dict of records keyed by id."""

    def __init__(self, records=None) -> None:
        self._records = {r.id: r for r in (records or [])}

    def list(self):
        return list(self._records.values())

    def get(self, record_id: str):
        return self._records.get(record_id)

    def add(self, record) -> None:
        if record.id in self._records:
            raise ValueError(f"{type(record).__name__} '{record.id}' already exists")
        self._records[record.id] = record

    def update(self, record) -> None:
        if record.id not in self._records:
            raise KeyError(f"Unknown {type(record).__name__} '{record.id}'")
        self._records[record.id] = record


class InMemoryPatientRepository(_InMemoryStore):
    pass


class InMemoryProviderRepository(_InMemoryStore):
    pass


class InMemoryServiceRepository(_InMemoryStore):
    pass


class InMemoryInvoiceRepository(_InMemoryStore):
    pass


class InMemoryPaymentPlanRepository(_InMemoryStore):
    def list(self, patient_id: str | None = None) -> list[PaymentPlan]:
        plans = super().list()
        if patient_id is None:
            return plans
        return [p for p in plans if p.patient_id == patient_id]
