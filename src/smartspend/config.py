"""Centralized configuration management for SmartSpend.

This module provides a Pydantic Settings-based configuration system that
consolidates all application settings with environment variable integration,
type validation, and clear error handling.
"""

import re
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROFILE_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def _validate_profile(profile: str) -> str:
    """Raise ValueError unless the profile name is safe for use as a filename."""
    if not profile:
        raise ValueError("Profile name cannot be empty")
    if not _PROFILE_PATTERN.match(profile):
        raise ValueError(
            f"Invalid profile: {profile}. "
            "Profile name must contain only alphanumeric characters, "
            "dashes, and underscores"
        )
    return profile


class DatabaseConfig(BaseModel):
    """Persistence backend settings."""

    model_config = ConfigDict(frozen=True)

    backend: Literal["duckdb", "snapshot"] = Field(
        default="duckdb",
        description="Storage strategy: embedded DuckDB or JSON snapshot with write-behind",
    )
    path: Path | None = Field(
        default=None,
        description=(
            "Path to DuckDB database file "
            "(default: data/<profile>/smartspend.duckdb)"
        ),
    )
    snapshot_path: Path | None = Field(
        default=None,
        description="Path to JSON snapshot file (default: data/<profile>/smartspend.json)",
    )
    flush_delay_ms: int = Field(
        default=100,
        ge=0,
        le=10_000,
        description="Quiet period before a debounced snapshot write",
    )
    create_dirs: bool = Field(
        default=True, description="Automatically create database directories"
    )

    @field_validator("path")
    @classmethod
    def validate_database_path(cls, v: Path | None) -> Path | None:
        """Ensure database path has correct extension."""
        if v is not None and not str(v).endswith((".db", ".duckdb")):
            raise ValueError("Database path must end with .db or .duckdb")
        return v

    @field_validator("snapshot_path")
    @classmethod
    def validate_snapshot_path(cls, v: Path | None) -> Path | None:
        """Ensure snapshot path is a JSON file."""
        if v is not None and v.suffix != ".json":
            raise ValueError("Snapshot path must end with .json")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    model_config = ConfigDict(frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_to_file: bool = Field(default=False, description="Enable file logging")
    log_file_path: Path = Field(
        default=Path("logs/smartspend.log"), description="Path to log file"
    )
    max_file_size_mb: int = Field(
        default=10, ge=1, le=1000, description="Maximum log file size in MB"
    )
    backup_count: int = Field(
        default=3, ge=1, le=50, description="Number of log file backups to keep"
    )


class SmartSpendSettings(BaseSettings):
    """Main application settings with environment variable integration.

    Environment variables are loaded with the SMARTSPEND_ prefix.
    For nested configs, use double underscores: SMARTSPEND_DATABASE__BACKEND
    """

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    profile: str = Field(
        default="default",
        description="User profile name (e.g., alice, bob, household)",
    )
    timezone: str | None = Field(
        default=None,
        description="IANA zone used for day/month bucketing (default: device local time)",
    )
    data_dir: Path = Field(
        default=Path("data"), description="Root directory for per-profile data"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SMARTSPEND_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("profile")
    @classmethod
    def validate_profile_name(cls, v: str) -> str:
        """Ensure profile name is safe for use as a filename."""
        return _validate_profile(v)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Reject zone names the tz database does not know."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def duckdb_path(self) -> Path:
        """DuckDB file for this profile."""
        return self.database.path or self.data_dir / self.profile / "smartspend.duckdb"

    @property
    def snapshot_path(self) -> Path:
        """JSON snapshot file for this profile."""
        return (
            self.database.snapshot_path
            or self.data_dir / self.profile / "smartspend.json"
        )

    @property
    def tzinfo(self) -> ZoneInfo | None:
        """Configured zone, or None for the device-local zone."""
        return ZoneInfo(self.timezone) if self.timezone else None

    def create_directories(self) -> None:
        """Create necessary directories for the application."""
        directories = [self.duckdb_path.parent, self.snapshot_path.parent]
        if self.logging.log_to_file:
            directories.append(self.logging.log_file_path.parent)

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)


# Global settings instances - lazy loaded per profile
_settings_cache: dict[str, SmartSpendSettings] = {}
_current_profile: str = "default"


def get_settings(profile: str | None = None) -> SmartSpendSettings:
    """Get the settings instance for the specified user profile.

    Settings are loaded once per profile and cached.

    Args:
        profile: User profile name. Defaults to the current profile.

    Returns:
        SmartSpendSettings: The configuration instance for the profile

    Raises:
        ValueError: If configuration is missing or invalid
    """
    if profile is None:
        profile = _current_profile

    if profile in _settings_cache:
        return _settings_cache[profile]

    try:
        settings = SmartSpendSettings(profile=profile)

        if settings.database.create_dirs:
            settings.create_directories()

        _settings_cache[profile] = settings
        return settings

    except Exception as e:
        raise ValueError(f"Configuration error for profile '{profile}': {e}") from e


def set_current_profile(profile: str) -> None:
    """Set the current active user profile.

    Raises:
        ValueError: If profile name contains invalid characters
    """
    global _current_profile

    _current_profile = _validate_profile(profile)


def get_current_profile() -> str:
    """Get the current active user profile."""
    return _current_profile


def reload_settings(profile: str | None = None) -> SmartSpendSettings:
    """Reload settings from environment variables.

    Useful for testing or when environment variables change at runtime.
    """
    if profile is None:
        profile = _current_profile

    _settings_cache.pop(profile, None)
    return get_settings(profile)


def clear_settings_cache() -> None:
    """Drop every cached settings instance."""
    _settings_cache.clear()


def get_database_config() -> DatabaseConfig:
    """Get the persistence configuration for the current profile."""
    return get_settings().database


def get_logging_config() -> LoggingConfig:
    """Get the logging configuration for the current profile."""
    return get_settings().logging
