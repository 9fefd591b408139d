"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: str = _ENVIRONMENT
    timezone: str = "UTC"
    sweep_interval_seconds: float = 60.0
    sweep_enabled: bool = True
    minimum_session_minutes: int = 30
    default_theory_capacity: int = 10
    smart_booking_window_days: int = 7
    admin_contact_email: str = "admin@drivetime.com"

    model_config = SettingsConfigDict(
        env_prefix="DRIVETIME_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
