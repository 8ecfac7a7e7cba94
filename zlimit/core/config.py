"""zlimit settings, read from ``ZLIMIT_*`` environment variables.

A ``.env.{ZLIMIT_ENV}`` file found from the working directory upwards is
loaded first; variables already set in the environment win.
"""

from __future__ import annotations

import os
from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ZLIMIT_ENV = os.getenv("ZLIMIT_ENV", "development")

# Nested BaseSettings don't inherit env_file, so populate os.environ up front
_env_file = find_dotenv(f".env.{ZLIMIT_ENV}", usecwd=True)
if _env_file:
    load_dotenv(_env_file, override=False)


def _build_limiter_settings() -> "LimiterSettings":
    return LimiterSettings()


def _build_log_settings() -> "LogSettings":
    return LogSettings()


class LimiterSettings(BaseSettings):
    """Limiter registry configuration."""

    clock: Literal["wall", "monotonic"] = Field(
        "wall",
        description="Time source for throttling: wall clock or monotonic clock",
    )
    log_decisions: bool = Field(
        True,
        description="Emit a DEBUG log record for every allow/suppress decision",
    )

    model_config = SettingsConfigDict(
        env_prefix="ZLIMIT_LIMITER_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(
        "INFO",
        description="Root log level (DEBUG, INFO, WARNING, ...)",
    )
    format: Literal["json", "plain"] = Field(
        "json",
        description="Log line format",
    )
    output: Literal["stdout", "file"] = Field(
        "stdout",
        description="Where log records are written",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output is 'file'",
    )
    max_bytes: int = Field(
        0,
        description="Rotate the log file at this size; 0 disables rotation",
        ge=0,
    )
    backup_count: int = Field(
        3,
        description="Number of rotated log files to keep",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="ZLIMIT_LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main settings container.

    Automatically loads from the appropriate .env.{ZLIMIT_ENV} file.
    Raises validation errors on import if a value is malformed.
    """

    env: str = ZLIMIT_ENV
    limiter: LimiterSettings = Field(default_factory=_build_limiter_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        env_prefix="ZLIMIT_",
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
