"""Ownership ledger settings, read from the environment via pydantic-settings.

Variables use the OWNERSHIP_ prefix, e.g. OWNERSHIP_LOG_LEVEL=DEBUG or
OWNERSHIP_BASE_CURRENCY=EUR. A local .env file is honoured.

get_settings() is cached, so each process reads the environment once.
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OwnershipSettings(BaseSettings):
    """Settings for the ownership service and its exports."""

    model_config = SettingsConfigDict(
        env_prefix="OWNERSHIP_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    # Currency recorded on investment records and used in workbook formats
    base_currency: str = "USD"

    # Excel export
    workbook_title: str = "Ownership Ledger"

    @field_validator("base_currency")
    @classmethod
    def validate_base_currency(cls, v: str) -> str:
        """Validate base currency is uppercase 3-letter ISO 4217 code."""
        if not v.isupper() or len(v) != 3:
            raise ValueError(f"Currency must be 3-letter uppercase ISO 4217 code, got: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> OwnershipSettings:
    return OwnershipSettings()
