"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here, including the
deployment switches that decide which storage backend is used. Business
logic never reads the environment directly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LocalStorageSettings(BaseSettings):
    """Local JSON file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding transactions.json and settings.json"
    )


class GoogleSheetsSettings(BaseSettings):
    """Remote document storage configuration (Google Sheets backed)."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore"
    )

    credentials_path: str = Field(
        default="",
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        default="",
        description="ID of the spreadsheet used as the document store"
    )
    documents_sheet_name: str = Field(
        default="Documents",
        description="Worksheet holding one row per stored document"
    )
    document_prefix: str = Field(
        default="finance",
        validation_alias=AliasChoices(
            "document_prefix",
            "GOOGLE_SHEETS_DOCUMENT_PREFIX",
            "BLOB_PREFIX",
        ),
        description="Name prefix for stored documents (<prefix>/<name>)"
    )

    @field_validator("document_prefix")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        """Normalize 'finance/' and '/finance' to 'finance'."""
        return v.strip().strip("/") or "finance"

    @property
    def is_configured(self) -> bool:
        """Both credentials and a target spreadsheet are set."""
        return bool(self.credentials_path and self.spreadsheet_id)


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
        description="Enable debug mode (shows tracebacks in the UI)"
    )

    # Storage selection
    storage_backend: str = Field(
        default="auto",
        pattern="^(auto|local|remote)$",
        description="Which storage backend to use; 'auto' follows the deployment switches"
    )
    vercel: bool = Field(
        default=False,
        description="Set to 1 by the hosting platform in production"
    )
    on_vercel: bool = Field(
        default=False,
        description="Manual production switch"
    )

    # Presentation
    recent_transactions_limit: int = Field(
        default=12,
        ge=1,
        le=100,
        description="How many recent transactions the dashboard shows"
    )

    @property
    def is_production(self) -> bool:
        return self.vercel or self.on_vercel

    @property
    def use_remote_storage(self) -> bool:
        """Resolve the storage backend choice."""
        if self.storage_backend == "remote":
            return True
        if self.storage_backend == "local":
            return False
        return self.is_production


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

    # Note: sub-settings are loaded lazily so a missing group only
    # fails the code path that needs it

    @property
    def local_storage(self) -> LocalStorageSettings:
        return LocalStorageSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

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
    Useful for startup checks and the settings page.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    try:
        _ = settings.local_storage
        results["local_storage"] = True
    except Exception as e:
        results["local_storage"] = False
        results["local_storage_error"] = str(e)

    try:
        sheets = settings.google_sheets
        results["google_sheets"] = sheets.is_configured
        if not sheets.is_configured:
            results["google_sheets_error"] = (
                "GOOGLE_SHEETS_CREDENTIALS_PATH and GOOGLE_SHEETS_SPREADSHEET_ID must be set"
            )
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    return results
