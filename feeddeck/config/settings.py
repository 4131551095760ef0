"""
FeedDeck Configuration System
=============================

Configuration management with environment variables and Pydantic models.
Environment variables override Field defaults with clear precedence.
"""

from pathlib import Path
from typing import List, Optional
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RefreshSettings(BaseModel):
    """Entry admission and refresh scheduling configuration."""
    max_items: int = Field(default=50, ge=1, le=500, description="Maximum entries ingested per source per refresh")
    time_buffer: int = Field(default=10, ge=0, le=3600, description="Seconds of tolerance when comparing entry dates to the last refresh")
    staleness_seconds: int = Field(default=60 * 60, ge=60, description="Minimum age of a source before the scheduler refreshes it")
    sources_per_profile: int = Field(default=10, ge=1, le=100, description="Sources refreshed per profile per scheduled run")
    default_batch: int = Field(default=50, ge=1, le=1000, description="Profiles selected per scheduled run")
    default_max_sources: int = Field(default=100, ge=1, le=10000, description="Sources refreshed per scheduled run")
    free_trial_days: int = Field(default=7, ge=0, le=365, description="Days a free profile is refreshed by the scheduler after sign-up")
    throttled_source_type: Optional[str] = Field(default="reddit", description="Source type refreshed less often for free profiles")
    throttle_seconds: int = Field(default=60 * 60 * 24, ge=0, description="Minimum interval between refreshes of the throttled source type")
    deprecated_source_types: List[str] = Field(default_factory=lambda: ["nitter"], description="Source types that are never refreshed")

    @field_validator('deprecated_source_types')
    @classmethod
    def normalize_types(cls, v):
        """Lower-case and de-duplicate source type names."""
        return sorted({t.strip().lower() for t in v if t and t.strip()})


class LimitsSettings(BaseModel):
    """Outbound request limits."""
    request_timeout: int = Field(default=5, ge=1, le=60, description="Request timeout in seconds for feeds and lookups")
    http_retries: int = Field(default=2, ge=0, le=5, description="Retries for 429/5xx responses")


class SourceSettings(BaseModel):
    """Credentials used by platform adapters for secondary lookups."""
    youtube_api_key: Optional[str] = Field(default=None, description="YouTube Data API key for channel icons")


class AuthSettings(BaseModel):
    """Credentials accepted by the scheduled refresh entry point."""
    cron_secret: Optional[str] = Field(default=None, description="Shared secret sent by the external scheduler")
    service_role_key: Optional[str] = Field(default=None, description="Privileged service credential")

    def accepted_credentials(self) -> List[str]:
        return [c for c in (self.cron_secret, self.service_role_key) if c]


class DatabaseSettings(BaseModel):
    """Database configuration."""
    path: str = Field(default="data/feeddeck.db", description="SQLite database file path")
    pool_size: int = Field(default=5, ge=1, le=20, description="Connection pool size")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default="logs/feeddeck.log", description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class FeedDeckSettings(BaseSettings):
    """Main application settings."""

    refresh: RefreshSettings = Field(default_factory=RefreshSettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)
    sources: SourceSettings = Field(default_factory=SourceSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Application metadata
    app_name: str = Field(default="FeedDeck", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "FEEDDECK_",
        "extra": "ignore",
    }

    def validate_configuration(self) -> None:
        """Validate complete configuration."""
        errors = []

        try:
            db_path = Path(self.database.path)
            db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            errors.append(f"Invalid database path: {e}")

        if self.logging.file_path:
            try:
                log_path = Path(self.logging.file_path)
                log_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid log file path: {e}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> FeedDeckSettings:
    """Load settings from environment variables and defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        settings = FeedDeckSettings()
        settings.validate_configuration()
        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        ) from e


# Global settings instance
_settings: Optional[FeedDeckSettings] = None


def get_settings(reload: bool = False) -> FeedDeckSettings:
    """Get global settings instance (singleton pattern).

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
