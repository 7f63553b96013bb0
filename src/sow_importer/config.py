"""Configuration management for the SoW importer.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
SOW_ prefix, or via a .env file in the project root.

Environment Variables:
    SOW_MAX_FILE_SIZE_MB: Maximum upload size in MB (default: 10)
    SOW_METADATA_SCAN_ROWS: Leading rows scanned for title/description (default: 5)
    SOW_MAX_IMPORT_ROWS: Optional cap on rows read from an upload
    SOW_WORKING_HOURS_PER_DAY: Hours per working day for estimates (default: 8)
    SOW_LOG_LEVEL: Logging level (default: INFO)
    SOW_DEBUG: Enable debug mode (default: false)
    SOW_CORS_ORIGINS: Comma-separated CORS origins (default: *)
    SOW_SERVER_HOST: Server bind host (default: 0.0.0.0)
    SOW_SERVER_PORT: Server bind port (default: 8000)
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Example .env file:
        SOW_LOG_LEVEL=DEBUG
        SOW_MAX_FILE_SIZE_MB=20
    """

    model_config = SettingsConfigDict(
        env_prefix="SOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Upload Settings
    # =========================================================================

    max_file_size_mb: int = 10
    """Maximum upload size in megabytes."""

    max_import_rows: int | None = None
    """Optional cap on the number of rows read from an uploaded sheet."""

    # =========================================================================
    # Structuring Settings
    # =========================================================================

    metadata_scan_rows: int = 5
    """Number of leading rows scanned for title and description labels."""

    # =========================================================================
    # Estimation Settings
    # =========================================================================

    working_hours_per_day: int = 8
    """Hours in a working day, used to convert estimated hours to days."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional error details."""

    # =========================================================================
    # Server Settings
    # =========================================================================

    cors_origins: str = "*"
    """Comma-separated list of allowed CORS origins, or * for all."""

    server_host: str = "0.0.0.0"
    """Host address for the server to bind to."""

    server_port: int = 8000
    """Port for the server to listen on."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        """Validate file size is positive and reasonable."""
        if not 1 <= v <= 500:
            raise ValueError(f"max_file_size_mb must be between 1 and 500, got {v}")
        return v

    @field_validator("max_import_rows")
    @classmethod
    def validate_max_import_rows(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"max_import_rows must be at least 1, got {v}")
        return v

    @field_validator("metadata_scan_rows")
    @classmethod
    def validate_metadata_scan_rows(cls, v: int) -> int:
        """Validate the metadata window is small and non-empty."""
        if not 1 <= v <= 50:
            raise ValueError(f"metadata_scan_rows must be between 1 and 50, got {v}")
        return v

    @field_validator("working_hours_per_day")
    @classmethod
    def validate_working_hours(cls, v: int) -> int:
        if not 1 <= v <= 24:
            raise ValueError(
                f"working_hours_per_day must be between 1 and 24, got {v}"
            )
        return v

    @field_validator("server_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"server_port must be between 1 and 65535, got {v}")
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary suitable for logging.

        Returns:
            Dictionary representation of all settings.
        """
        return {
            "max_file_size_mb": self.max_file_size_mb,
            "max_import_rows": self.max_import_rows,
            "metadata_scan_rows": self.metadata_scan_rows,
            "working_hours_per_day": self.working_hours_per_day,
            "log_level": self.log_level,
            "debug": self.debug,
            "cors_origins": self.cors_origins,
            "server_host": self.server_host,
            "server_port": self.server_port,
        }


def validate_settings_on_startup(s: Settings) -> None:
    """Validate settings on application startup.

    Emits warnings for configurations that are legal but unsuitable for
    production, then logs a configuration summary.

    Args:
        s: Settings instance to validate.
    """
    logger = logging.getLogger(__name__)

    if s.cors_origins == "*" and not s.debug:
        logger.warning(
            "CORS is configured to allow all origins (*). "
            "Consider restricting this in production."
        )

    if s.metadata_scan_rows != 5:
        logger.warning(
            f"metadata_scan_rows is {s.metadata_scan_rows}; imports will not "
            "match documents produced with the default 5-row window."
        )

    logger.info(
        f"Configuration loaded: log_level={s.log_level}, debug={s.debug}, "
        f"max_file_size_mb={s.max_file_size_mb}, "
        f"metadata_scan_rows={s.metadata_scan_rows}"
    )


# Create the global settings instance
settings = Settings()
