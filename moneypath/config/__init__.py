"""Configuration package."""

from moneypath.config.settings import (
    DEFAULT_CATEGORIES,
    DEFAULT_ROOMMATES,
    AppSettings,
    LedgerSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "DEFAULT_ROOMMATES",
    "AppSettings",
    "LedgerSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
