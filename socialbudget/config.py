"""Centralized configuration loaded from environment variables."""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings sourced from .env / environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────────────
    socialbudget_env: str = "development"
    socialbudget_log_level: str = "INFO"

    # ── Budget API ───────────────────────────────────────────────────
    api_base_url: str = "http://localhost:8080"
    api_timeout_seconds: float = 10.0
    api_retry_attempts: int = 3

    # ── Dashboard ────────────────────────────────────────────────────
    attendee_blur_delay_ms: int = 120
    toast_duration_seconds: float = 3.0
    currency_symbol: str = "$"

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("api_retry_attempts")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        return max(1, v)

    # ── Derived ──────────────────────────────────────────────────────
    @property
    def attendee_blur_delay(self) -> float:
        """Deferred close delay for the attendee selector, in seconds."""
        return self.attendee_blur_delay_ms / 1000

    @property
    def is_production(self) -> bool:
        return self.socialbudget_env == "production"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
