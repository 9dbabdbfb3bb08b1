from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Resolve project root (repo root) relative to this file.
ROOT_DIR = Path(__file__).resolve().parents[3]
ENV_PATH = ROOT_DIR / ".env"


class UpsConfig(BaseModel):
    base_url: str = "https://wwwcie.ups.com"
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    shipper_number: Optional[str] = None
    rating_version: str = "v2403"
    request_option: str = "Rate"
    transaction_source: str = "carrier-rates"
    timeout_seconds: float = 30.0

    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret and self.shipper_number)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def rate_url(self) -> str:
        return f"{self.base_url}/api/rating/{self.rating_version}/{self.request_option}"

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/security/v1/oauth/token"


class Settings(BaseModel):
    log_level: str = "INFO"
    ups: UpsConfig = Field(default_factory=UpsConfig)

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(dotenv_path=ENV_PATH, override=False)

    def _to_float(env_value: str | None, default: float) -> float:
        if env_value is None:
            return default
        try:
            return float(env_value)
        except ValueError:
            return default

    defaults = UpsConfig()
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        ups=UpsConfig(
            base_url=os.getenv("UPS_BASE_URL", defaults.base_url),
            client_id=os.getenv("UPS_CLIENT_ID"),
            client_secret=os.getenv("UPS_CLIENT_SECRET"),
            shipper_number=os.getenv("UPS_SHIPPER_NUMBER"),
            rating_version=os.getenv("UPS_RATING_VERSION", defaults.rating_version),
            request_option=os.getenv("UPS_REQUEST_OPTION", defaults.request_option),
            transaction_source=os.getenv("UPS_TRANSACTION_SOURCE", defaults.transaction_source),
            timeout_seconds=_to_float(os.getenv("UPS_TIMEOUT_SECONDS"), defaults.timeout_seconds),
        ),
    )
