"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable of the core (artificial latency, seeding, session
storage, logging) is declared and validated in one place.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Entity store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_STORE_",
        extra="ignore"
    )

    mutation_latency_ms: int = Field(
        default=300,
        ge=0,
        le=10_000,
        description="Artificial latency applied to create/update/delete"
    )
    seed_fixtures: bool = Field(
        default=True,
        description="Load fixture records into the stores at startup"
    )
    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Currency used when an account does not specify one"
    )

    @field_validator('default_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper()

    @property
    def mutation_latency_seconds(self) -> float:
        """Latency as accepted by asyncio.sleep."""
        return self.mutation_latency_ms / 1000


class SessionSettings(BaseSettings):
    """Session store (mock authentication) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_SESSION_",
        extra="ignore"
    )

    auth_latency_ms: int = Field(
        default=500,
        ge=0,
        le=10_000,
        description="Artificial latency applied to login/register"
    )
    storage_path: Optional[str] = Field(
        default=None,
        description="JSON file holding the token/user blob (None = in memory)"
    )
    token_key: str = Field(
        default="auth_token",
        description="Storage key of the session token"
    )
    user_key: str = Field(
        default="user_data",
        description="Storage key of the serialized user"
    )
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for session storage writes"
    )

    @field_validator('storage_path')
    @classmethod
    def validate_storage_path(cls, v: Optional[str]) -> Optional[str]:
        """Warn if the parent directory doesn't exist (but don't fail - might be mounted later)."""
        if v and not Path(v).parent.exists():
            import warnings
            warnings.warn(
                f"Session storage directory not found for {v}. "
                "Make sure it exists before the first login."
            )
        return v

    @property
    def auth_latency_seconds(self) -> float:
        return self.auth_latency_ms / 1000


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False = console renderer)"
    )

    # Audit trail
    audit_max_events: int = Field(
        default=10_000,
        ge=1,
        description="Events kept by the in-memory audit trail before the oldest are dropped"
    )

    # Validation thresholds
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a transaction date can be"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so one bad section does not
    # prevent reading the others.

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def session(self) -> SessionSettings:
        return SessionSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the sections that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("store", "session", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
