"""Configuration package."""

from budget_tracker.config.settings import (
    AppSettings,
    LoggingSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
