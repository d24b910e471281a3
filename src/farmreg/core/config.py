"""Runtime settings loaded from environment variables."""

import os
from functools import lru_cache

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Service tunables. Every field maps to an upper-case env var."""

    port: int = Field(3000, gt=0, lt=65536)
    session_timeout_seconds: float = Field(5 * 60, gt=0, description="Idle time before a session expires")
    sweep_interval_seconds: float = Field(60, gt=0, description="Expiry sweeper period")
    response_deadline_seconds: float = Field(25, gt=0, description="Per-request response deadline")
    environment: str = "development"
    sentry_dsn: str | None = None
    app_timezone: str = "Africa/Nairobi"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from os.environ, falling back to field defaults."""
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(name.upper())
            if raw is not None and raw.strip() != "":
                values[name] = raw.strip()
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    """Cached settings for the running process."""
    return Settings.from_env()
