"""Configuration for the billing core, loaded from configs/config.json."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = logging.getLogger(__name__)

CONFIG_FILE = "configs/config.json"

# Calculator defaults; the config file may override them for the service layer.
OVERDUE_AFTER_DAYS = 30
INSTALLMENT_INTERVAL_DAYS = 30
DEFAULT_COMMISSION_RATE = 0.30
INSTALLMENT_OPTIONS = (2, 3, 4, 6, 8, 10, 12)


class ReceivablesSettings(BaseModel):
    overdue_after_days: int = Field(default=OVERDUE_AFTER_DAYS, ge=0)


class PaymentPlanSettings(BaseModel):
    installment_interval_days: int = Field(default=INSTALLMENT_INTERVAL_DAYS, gt=0)
    installment_options: list[int] = list(INSTALLMENT_OPTIONS)


class CommissionSettings(BaseModel):
    default_rate: float = Field(default=DEFAULT_COMMISSION_RATE, ge=0, le=1)
    eligible_roles: list[str] = ["dentist", "admin"]


class EInvoicingSettings(BaseModel):
    endpoint: str = "https://api.factus.com/v1/facturas"
    timeout_seconds: float = 30.0
    simulate: bool = True
    simulated_delay_seconds: float = 1.5


class ClinicalSummarySettings(BaseModel):
    model: str = "gpt-4o-mini"
    temperature: float = 0.0


class BillingConfig(BaseSettings):
    """All configurable knobs of the billing core.

    Values come from, highest priority first: constructor arguments,
    ``DENTAL_BILLING_*`` environment variables (``__`` separates nested
    keys, e.g. ``DENTAL_BILLING_RECEIVABLES__OVERDUE_AFTER_DAYS``), then
    ``configs/config.json``. API keys are read from their usual variables.
    """

    model_config = SettingsConfigDict(
        json_file=CONFIG_FILE,
        env_prefix="DENTAL_BILLING_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    receivables: ReceivablesSettings = ReceivablesSettings()
    payment_plans: PaymentPlanSettings = PaymentPlanSettings()
    commissions: CommissionSettings = CommissionSettings()
    e_invoicing: EInvoicingSettings = EInvoicingSettings()
    clinical_summary: ClinicalSummarySettings = ClinicalSummarySettings()

    factus_api_key: str | None = Field(default=None, validation_alias="FACTUS_API_KEY")
    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            JsonConfigSettingsSource(settings_cls),
        )


def load_config(path: str | Path | None = None) -> BillingConfig:
    """Settings from ``path`` instead of the default config file."""
    if path is None:
        return BillingConfig()
    logger.debug("Loading billing config from %s", path)
    return BillingConfig(**JsonConfigSettingsSource(BillingConfig, json_file=path)())
