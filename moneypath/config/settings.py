"""
Configuration Management for MoneyPath

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Defaults reproduce the behaviour of the original browser app, so a fresh
install needs no configuration at all.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CATEGORIES = ["Udhari", "Outside", "Useless"]
DEFAULT_ROOMMATES = ["You", "Ravi"]


class StorageSettings(BaseSettings):
    """Local persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONEYPATH_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Storage backend: 'file' (JSON on disk) or 'memory'"
    )
    data_dir: Path = Field(
        default=Path.home() / ".moneypath",
        description="Directory holding the JSON state documents"
    )
    state_key: str = Field(
        default="financeData",
        min_length=1,
        description="Key (slot name) the state document is stored under"
    )

    # Browser local storage caps an origin at roughly 5 MiB
    max_payload_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1024,
        description="Largest state document the backend will accept"
    )
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a state write before giving up"
    )

    @field_validator('data_dir')
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Allow '~' in the configured directory."""
        return v.expanduser()


class LedgerSettings(BaseSettings):
    """Defaults for a freshly initialized ledger."""

    model_config = SettingsConfigDict(
        env_prefix="MONEYPATH_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES),
        description="Categories a new ledger starts with"
    )
    default_roommates: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ROOMMATES),
        description="Roommates a new ledger starts with"
    )
    currency_symbol: str = Field(
        default="₹",
        max_length=5,
        description="Symbol shown in front of amounts"
    )

    @field_validator('default_categories', 'default_roommates')
    @classmethod
    def strip_and_dedupe(cls, v: list[str]) -> list[str]:
        """Trim labels, drop empties and duplicates, keep order."""
        seen = []
        for item in v:
            item = item.strip()
            if item and item not in seen:
                seen.append(item)
        return seen


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

    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )


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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

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

    for name in ("storage", "ledger", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
