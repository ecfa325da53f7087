"""
Sanjeevani Configuration Module

Centralized configuration management using Pydantic Settings.
Supports environment variables and .env files.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmergencyAccessSettings(BaseSettings):
    """Emergency access workflow settings."""

    model_config = SettingsConfigDict(
        env_prefix="SANJEEVANI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Token lifetime
    emergency_window_minutes: float = Field(default=15, gt=0)

    # Collaborator calls (credential service, patient data service)
    collaborator_timeout_seconds: float = Field(default=5.0, gt=0)

    # Access log storage; None keeps the log in memory
    log_store_path: str | None = None
    log_store_slot: str = "emergencyLogs"

    # Known-weak behaviors, off unless explicitly enabled
    qr_fallback_patient_id: str | None = None
    allow_insecure_token_fallback: bool = False

    # Reject tokens this process did not issue
    verify_issued_tokens: bool = False

    # Request context used when the caller supplies none
    default_ip_address: str | None = None
    default_location: str | None = None

    @property
    def emergency_window(self) -> timedelta:
        return timedelta(minutes=self.emergency_window_minutes)


class Settings:
    """
    Aggregated settings container.

    Usage:
        from sanjeevani.config import get_settings
        settings = get_settings()
        print(settings.emergency.emergency_window)
    """

    def __init__(self):
        self.emergency = EmergencyAccessSettings()

    @property
    def is_development(self) -> bool:
        return self.emergency.env == "development"

    @property
    def is_production(self) -> bool:
        return self.emergency.env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: The application settings
    """
    return Settings()
