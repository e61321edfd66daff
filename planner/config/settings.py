"""
Configuration Management for Wedding Planner

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets document store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the spreadsheet holding the planner collections"
    )

    # Each collection becomes one worksheet named <prefix><collection>
    worksheet_prefix: str = Field(
        default="",
        max_length=40,
        description="Optional prefix for worksheet names"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AuthSettings(BaseSettings):
    """Password gate and session lifetime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    password: str = Field(
        ...,
        min_length=1,
        description="Shared secret that unlocks the planner"
    )
    absolute_ttl_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Hard lifetime of a session, counted from login"
    )
    idle_ttl_minutes: int = Field(
        default=15,
        ge=1,
        le=24 * 60,
        description="Session lifetime counted from the last renewal"
    )
    warning_seconds: int = Field(
        default=60,
        ge=0,
        description="How long before idle expiry the renew prompt appears"
    )


class DashboardSettings(BaseSettings):
    """Dashboard loading and aggregation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    load_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=300,
        description="Give up on the initial dashboard load after this long"
    )
    top_categories: int = Field(
        default=10,
        ge=1,
        le=100,
        description="How many expense categories the breakdown keeps"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLANNER_",
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

    storage_backend: Literal["sheets", "memory"] = Field(
        default="sheets",
        description="Where documents live; 'memory' loses everything on restart"
    )

    # Defaults for the lazily created project document
    default_project_name: str = Field(
        default="Our Wedding",
        min_length=1,
        max_length=120,
    )
    default_currency: str = Field(
        default="PLN",
        min_length=3,
        max_length=3,
        description="ISO 4217 currency code shown next to amounts"
    )
    default_owners_note: str = Field(
        default="Private app - password gated",
        max_length=500,
    )

    @field_validator('default_currency')
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


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

    # Sub-settings are loaded lazily to allow partial configuration
    # (the in-memory backend needs no Google credentials)

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def dashboard(self) -> DashboardSettings:
        return DashboardSettings()

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

    Returns a dict of {setting_name: is_valid} plus
    {setting_name}_error entries for the ones that failed.
    Useful for startup checks and the settings page.
    """
    results = {}

    settings = get_settings()

    groups = {
        "google_sheets": lambda: settings.google_sheets,
        "auth": lambda: settings.auth,
        "dashboard": lambda: settings.dashboard,
        "app": lambda: settings.app,
    }

    for name, load in groups.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
