from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PollerSettings(BaseSettings):
    """Process-wide defaults, read from ``BACKOFF_POLLER_*`` env vars or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="BACKOFF_POLLER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    DEFAULT_INTERVAL_MS: int = Field(8000, gt=0)
    DEFAULT_MAX_INTERVAL_MS: int = Field(300000, gt=0)
    LOG_LEVEL: str = "INFO"


@lru_cache()
def get_settings() -> PollerSettings:
    return PollerSettings()
