"""Application configuration using pydantic-settings."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.lib.log_taxonomy import SpyMarker
from src.models.policy import FilterConfig, ThresholdConfig

_LEVEL_ALIASES = {"WARN": "WARNING"}


class Settings(BaseSettings):
    """
    Spy logging settings loaded from environment variables and .env file.

    Environment variables (prefixed with ``SPYLOG_``) take precedence over
    .env file values.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPYLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging backend settings
    log_level: str = Field(default="INFO", description="Level of the spy event channel")
    debug_log_level: str = Field(
        default="INFO",
        description="Level of the internal diagnostics channel",
    )
    log_file: Path | None = Field(
        default=None,
        description="Rotating JSON log file, disabled when unset",
    )
    disabled_markers: frozenset[SpyMarker] = Field(
        default=frozenset(),
        description="Markers (and their children) whose events are dropped",
    )

    # SQL dump filtering
    dump_sql_select: bool = Field(default=True, description="Log select statements")
    dump_sql_insert: bool = Field(default=True, description="Log insert statements")
    dump_sql_update: bool = Field(default=True, description="Log update statements")
    dump_sql_delete: bool = Field(default=True, description="Log delete statements")
    dump_sql_create: bool = Field(default=True, description="Log create statements")
    dump_sql_filtering: bool | None = Field(
        default=None,
        description="Force filtering on or off; derived from the dump flags when unset",
    )

    # SQL timing thresholds
    sql_timing_warn_threshold_ms: int | None = Field(
        default=None,
        ge=0,
        description="Statements at least this slow are logged at WARN",
    )
    sql_timing_error_threshold_ms: int | None = Field(
        default=None,
        ge=0,
        description="Statements at least this slow are logged at ERROR",
    )

    @field_validator("log_level", "debug_log_level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        level = value.upper()
        level = _LEVEL_ALIASES.get(level, level)
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def filter_config(self) -> FilterConfig:
        """Build the filtering policy snapshot.

        Filtering is on as soon as one statement type is excluded, unless
        ``dump_sql_filtering`` forces it either way.
        """
        flags = (
            self.dump_sql_select,
            self.dump_sql_insert,
            self.dump_sql_update,
            self.dump_sql_delete,
            self.dump_sql_create,
        )
        filtering = self.dump_sql_filtering
        if filtering is None:
            filtering = not all(flags)

        return FilterConfig(*flags, filtering_enabled=filtering)

    @property
    def threshold_config(self) -> ThresholdConfig:
        """Build the timing threshold snapshot."""
        return ThresholdConfig(
            warn_threshold_ms=self.sql_timing_warn_threshold_ms,
            error_threshold_ms=self.sql_timing_error_threshold_ms,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings instance (cached for performance)

    Example:
        >>> settings = get_settings()
        >>> print(settings.log_level)
        'INFO'
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Drop the cached settings and load them again.

    The spy delegator reads settings on every event, so reloaded values take
    effect on the next intercepted call.
    """
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
