"""Patient clinical summaries generated by a language model."""

import logging
from datetime import date

from llama_index.core.llms import LLM
from llama_index.core.prompts import PromptTemplate
from pydantic import ValidationError

from ..config import BillingConfig
from ..schemas import ClinicalEntry, ClinicalSummary, ClinicalSummaryResult, Patient

logger = logging.getLogger(__name__)

SUMMARY_ERROR = "Could not generate the summary."


# --- LLM Provider ---


def get_llm(config: BillingConfig | None = None) -> LLM:
    """LLM for generating clinical summaries."""
    from llama_index.llms.openai import OpenAI

    config = config or BillingConfig()
    settings = config.clinical_summary
    return OpenAI(
        model=settings.model,
        temperature=settings.temperature,
        api_key=config.openai_api_key,
    )


# --- Prompts ---

SUMMARY_PROMPT = PromptTemplate(
    """You are an expert dental clinical assistant. Review the history of
patient {patient_name} (age: {age}).

Medical history: {medical_history}
Allergies: {allergies}

Recent clinical records:
{history_text}

Respond with a JSON object only, no prose, in this exact shape:
{{"summary": ["point 1", "point 2", "point 3"], "recommendation": "..."}}

"summary" holds 3 concise key points about the patient's condition.
"recommendation" is one recommendation for the next appointment."""
)


def build_summary_prompt(
    patient: Patient, records: list[ClinicalEntry], today: date | None = None
) -> str:
    today = today or date.today()
    age = today.year - patient.birth_date.year if patient.birth_date else "unknown"
    history_text = "\n".join(
        f"- Date: {r.date.isoformat()}. Procedure: {r.procedure}. Notes: {r.notes}"
        for r in records
    )
    return SUMMARY_PROMPT.format(
        patient_name=patient.name,
        age=age,
        medical_history=", ".join(patient.medical_history) or "None",
        allergies=", ".join(patient.allergies) or "None",
        history_text=history_text or "- No records",
    )


async def generate_clinical_summary(
    patient: Patient,
    records: list[ClinicalEntry],
    llm: LLM,
    today: date | None = None,
) -> ClinicalSummaryResult:
    """Ask the LLM for a 3-point summary and a next-visit recommendation.

    Any failure (network, provider, malformed JSON) comes back as a result
    with ``error`` set so the caller can show a non-fatal notice.
    """
    prompt = build_summary_prompt(patient, records, today)
    try:
        response = await llm.acomplete(prompt)
        summary = ClinicalSummary.model_validate_json(_strip_code_fence(str(response)))
    except ValidationError as e:
        logger.warning("Malformed clinical summary for patient %s: %s", patient.id, e)
        return ClinicalSummaryResult(patient_id=patient.id, error=SUMMARY_ERROR)
    except Exception as e:
        logger.warning("Clinical summary request failed for patient %s: %s", patient.id, e)
        return ClinicalSummaryResult(patient_id=patient.id, error=SUMMARY_ERROR)

    return ClinicalSummaryResult(patient_id=patient.id, summary=summary)


def _strip_code_fence(text: str) -> str:
    """Remove a ```json fence some models wrap around JSON output."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()
