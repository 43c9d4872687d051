"""
Configuration Management for SubTrack

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see where data is written and which currencies
the onboarding form offers, and ensures both are validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where subscriptions and the login flag are persisted."""

    model_config = SettingsConfigDict(
        env_prefix="SUBTRACK_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json",
        pattern="^(json|memory)$",
        description="Storage backend: 'json' files or 'memory' (nothing written)"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the JSON files"
    )
    subscriptions_file: str = Field(
        default="subscriptions.json",
        description="File name for the subscription list"
    )
    login_state_file: str = Field(
        default="login_state.json",
        description="File name for the logged-in flag"
    )

    @property
    def subscriptions_path(self) -> Path:
        return self.data_dir / self.subscriptions_file

    @property
    def login_state_path(self) -> Path:
        return self.data_dir / self.login_state_file


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Onboarding form
    default_currency: str = Field(
        default="EUR",
        min_length=3,
        max_length=3,
        description="Currency preselected on every configuration step"
    )
    supported_currencies: str = Field(
        default="EUR,USD,GBP",
        description="Comma-separated list of currencies offered on the form"
    )

    # Invariant handling
    strict_state_checks: Optional[bool] = Field(
        default=None,
        description=(
            "Raise on onboarding invariant violations. "
            "Defaults to True in development and False elsewhere."
        )
    )

    @field_validator('default_currency')
    @classmethod
    def upper_default_currency(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode='after')
    def validate_currencies(self) -> 'AppSettings':
        if self.strict_state_checks is None:
            self.strict_state_checks = self.app_environment == "development"
        if self.default_currency not in self.supported_currencies_list:
            raise ValueError(
                f"Default currency {self.default_currency} is not in supported currencies"
            )
        return self

    @property
    def supported_currencies_list(self) -> list[str]:
        """Get supported currencies as a list."""
        return [
            code.strip().upper()
            for code in self.supported_currencies.split(",")
            if code.strip()
        ]


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

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

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

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
