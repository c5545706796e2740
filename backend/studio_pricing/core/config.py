from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Any
from pathlib import Path
import os

from ..models.pricing_types import CoercionPolicy

_DEFAULT_ENV_FILE = str(Path(__file__).resolve().parents[2] / ".env")


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Package pricing defaults. Legacy behaviour recalculates packages when the
    # event duration differs from the authored hours and charm-rounds the result.
    PACKAGE_ALLOW_RECALC: bool = True
    PACKAGE_ROUNDING_MODE: str = "charm"

    # "zero" keeps the historical silent coercion of malformed numbers,
    # "strict" raises PricingInputError instead.
    NUMERIC_COERCION: str = "zero"

    model_config = SettingsConfigDict(
        env_prefix="STUDIO_PRICING_",
        extra="ignore",
        case_sensitive=True,
    )

    @field_validator("LOG_LEVEL", mode="before")
    def upper_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("PACKAGE_ROUNDING_MODE", "NUMERIC_COERCION", mode="before")
    def lower_choice(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("PACKAGE_ROUNDING_MODE")
    def known_rounding_mode(cls, v: str) -> str:
        if v not in ("exact", "charm"):
            raise ValueError("PACKAGE_ROUNDING_MODE must be 'exact' or 'charm'")
        return v

    @field_validator("NUMERIC_COERCION")
    def known_coercion(cls, v: str) -> str:
        if v not in ("zero", "strict"):
            raise ValueError("NUMERIC_COERCION must be 'zero' or 'strict'")
        return v


def load_settings() -> "Settings":
    return Settings(_env_file=os.getenv("ENV_FILE", _DEFAULT_ENV_FILE))


settings = load_settings()


def coercion_policy_from_config(config: "Settings | None" = None) -> CoercionPolicy:
    config = config or settings
    return CoercionPolicy.parse(config.NUMERIC_COERCION, CoercionPolicy.ZERO)
