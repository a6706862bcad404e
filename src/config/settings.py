# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for provider credentials, resource accounting
constants and logging options.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["gemini", "openai", "anthropic", "xai"]
PROVIDER_NAMES: tuple[str, ...] = ("gemini", "openai", "anthropic", "xai")


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    # Provider used when a step selects a model missing from the catalog.
    fallback_provider: str = "gemini"

    # Provider API keys (looked up by provider name at call time)
    gemini_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    xai_api_key: str = ""
    xai_base_url: str = "https://api.x.ai/v1"

    # === Pipeline ===
    pipeline_config_path: Path | None = None

    # === Resource accounting ===
    initial_mana: int = 60
    initial_experience: int = 1200
    run_cost: int = 20
    success_reward: int = 50

    # === Tracking ===
    call_log_path: Path | None = None

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("initial_mana", "initial_experience", "run_cost", "success_reward")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("resource counters and amounts must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.fallback_provider not in PROVIDER_NAMES:
            errors.append(
                f"FALLBACK_PROVIDER must be one of {', '.join(PROVIDER_NAMES)}, "
                f"got {self.fallback_provider!r}"
            )

        if self.log_retention < 0:
            errors.append("LOG_RETENTION must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    def api_key_for(self, provider: str) -> str:
        """Return the credential configured for a provider ("" if unset)."""
        return getattr(self, f"{provider}_api_key", "") or ""


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Load settings, optionally from a specific .env file."""
    if env_file is None:
        return Settings()
    return Settings(_env_file=str(env_file))  # type: ignore[call-arg]
