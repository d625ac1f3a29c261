"""Shared types for the dental clinic billing records."""

from datetime import date
from enum import Enum

from pydantic import BaseModel


class UserRole(str, Enum):
    """Roles a clinic user can hold."""

    ADMIN = "admin"
    DENTIST = "dentist"
    STUDENT = "student"
    RECEPTIONIST = "receptionist"


class PaymentMethod(str, Enum):
    """How a payment was settled."""

    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    INSURANCE = "insurance"


class Patient(BaseModel):
    """Patient demographic and clinical background information."""

    id: str
    name: str
    dni: str | None = None
    birth_date: date | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    social_service: bool = False
    medical_history: list[str] = []
    allergies: list[str] = []


class Provider(BaseModel):
    """Clinic user who may earn commissions on billed services."""

    id: str
    name: str
    email: str | None = None
    role: UserRole = UserRole.DENTIST
    specialty: str | None = None
    # Fraction of the line price, e.g. 0.30 for 30%
    commission_rate: float | None = None


class ServiceItem(BaseModel):
    """Catalog entry for a billable clinical service."""

    id: str
    code: str | None = None
    name: str
    category: str | None = None
    base_price: float = 0.0
    duration: int | None = None


class ValidationSeverity(str, Enum):
    """Severity level for validation findings."""

    HIGH = "HIGH"
    LOW = "LOW"


class ValidationStatus(str, Enum):
    """Status outcome of a validation check."""

    WARNING = "WARNING"
    ERROR = "ERROR"


class ValidationResult(BaseModel):
    """A user-facing validation failure; no partial effect has been applied."""

    check_name: str
    status: ValidationStatus = ValidationStatus.ERROR
    severity: ValidationSeverity = ValidationSeverity.HIGH
    detail: str
    recommendation: str | None = None
