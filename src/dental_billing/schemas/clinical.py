"""Clinical record and AI summary schemas."""

from datetime import date

from pydantic import BaseModel, Field


class ClinicalEntry(BaseModel):
    """A dated clinical note written by a dentist."""

    id: str
    patient_id: str
    dentist_id: str
    date: date
    procedure: str
    notes: str = ""
    teeth_involved: list[int] = []
    diagnosis: str | None = None


class ClinicalSummary(BaseModel):
    """Structured summary returned by the language model."""

    summary: list[str] = Field(min_length=1)
    recommendation: str = Field(min_length=1)


class ClinicalSummaryResult(BaseModel):
    """Outcome of a summary request; exactly one of summary/error is set."""

    patient_id: str
    summary: ClinicalSummary | None = None
    error: str | None = None
