# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the roster
and grade ledger backend. Settings are loaded from environment variables
with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.grading.min_grade)
    75
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Portal database configuration.

    The portal database stores rosters, grade entries, the activity log
    and the directory reference tables maintained by the enrollment
    workflow.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "portal"
    password: SecretStr = SecretStr("portal_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "school_portal"
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class GradingSettings(BaseSettings):
    """Grade ledger configuration.

    Attributes:
        min_grade: Lowest accepted quarter grade (inclusive).
        max_grade: Highest accepted quarter grade (inclusive).
    """

    model_config = SettingsConfigDict(
        env_prefix="GRADING_",
        extra="ignore",
    )

    min_grade: int = 75
    max_grade: int = 100

    @model_validator(mode="after")
    def validate_range(self) -> Self:
        """Reject an empty grade range."""
        if self.min_grade > self.max_grade:
            raise ValueError(
                f"GRADING_MIN_GRADE ({self.min_grade}) must not exceed "
                f"GRADING_MAX_GRADE ({self.max_grade})"
            )
        return self


class EnrollmentSettings(BaseSettings):
    """Enrollment directory configuration.

    Attributes:
        eligible_statuses: Enrollment record statuses that make a student
            eligible for rostering.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENROLLMENT_",
        extra="ignore",
    )

    eligible_statuses: list[str] = Field(default_factory=lambda: ["approved", "enrolled"])


class ActivityLogSettings(BaseSettings):
    """Activity log configuration.

    Attributes:
        page_size: Default number of log entries per page.
        max_page_size: Largest page a caller may request.
    """

    model_config = SettingsConfigDict(
        env_prefix="ACTIVITY_LOG_",
        extra="ignore",
    )

    page_size: int = 20
    max_page_size: int = 100


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        db: Database settings.
        grading: Grade ledger settings.
        enrollment: Enrollment directory settings.
        activity_log: Activity log settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    grading: GradingSettings = Field(default_factory=GradingSettings)
    enrollment: EnrollmentSettings = Field(default_factory=EnrollmentSettings)
    activity_log: ActivityLogSettings = Field(default_factory=ActivityLogSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            if self.db.password.get_secret_value() == "portal_password":
                raise ValueError(
                    "Database password must be changed from default in production. "
                    "Set DB_PASSWORD environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
