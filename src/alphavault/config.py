"""Application settings for the token dashboard service."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_SOURCES = ("mock", "live")


class Settings(BaseSettings):
    """Strongly typed runtime configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ALPHAVAULT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    data_source: str = Field(default="mock", description="Market data source: 'mock' generator or 'live' provider.")
    api_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        description="Base URL of the public market data provider.",
    )
    vs_currency: str = Field(default="usd", description="Quote currency for provider prices.")
    per_page: int = Field(default=100, ge=1, le=250, description="Number of top assets requested per refresh.")
    request_timeout_sec: float = Field(default=10.0, gt=0)
    refresh_interval_sec: int = Field(
        default=300,
        ge=1,
        validation_alias=AliasChoices(
            "refresh_interval_sec",
            "alphavault_refresh_interval_sec",
            "alphavault_refresh_interval_s",
        ),
    )
    refresh_on_startup: bool = Field(default=True, description="Start the refresh loop with the application.")
    metrics_enabled: bool = Field(default=True, description="Expose Prometheus metrics endpoint.")
    log_level: str = Field(default="INFO")
    mock_seed: Optional[int] = Field(default=None, description="Seed for the mock generator, for reproducible snapshots.")

    @field_validator("data_source", mode="before")
    @classmethod
    def _validate_source(cls, value):
        text = str(value or "").strip().lower()
        if text not in DATA_SOURCES:
            raise ValueError(f"data_source must be one of {', '.join(DATA_SOURCES)}")
        return text

    @field_validator("api_base_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance to avoid repeated environment parsing."""

    return Settings()
