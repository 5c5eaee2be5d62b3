"""
Configuration Management for Budget Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every knob (where the document lives, where logs go, how money is shown)
is validated once at startup instead of being read ad hoc.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Persisted document location."""
    
    model_config = SettingsConfigDict(
        env_prefix="BUDGET_TRACKER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    data_file: Path = Field(
        default=Path("data/ApplicationData.json"),
        description="Path to the JSON document holding users, budgets, categories and expenses"
    )
    
    @field_validator('data_file')
    @classmethod
    def validate_data_file(cls, v: Path) -> Path:
        """The document must be a file path, not a directory."""
        if v.exists() and v.is_dir():
            raise ValueError(f"Data file path {v} points to a directory")
        return v


class LoggingSettings(BaseSettings):
    """Log sink configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="BUDGET_TRACKER_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    directory: Path = Field(
        default=Path("logs"),
        description="Directory for the dated log files"
    )
    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_format: bool = Field(
        default=True,
        description="Render log lines as JSON (otherwise key=value)"
    )
    
    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="BUDGET_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol shown in front of amounts"
    )
    progress_bar_width: int = Field(
        default=50,
        ge=10,
        le=120,
        description="Width of the budget summary progress bar"
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
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, plus
    `<name>_error` entries for the ones that failed.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("storage", "logging", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
