"""
Configuration models for taglog using Pydantic v2 Settings.

Settings are read from the environment (``TAGLOG_`` prefix, ``__`` as the
nested delimiter), e.g. ``TAGLOG_CORE__LOG_LEVEL=DEBUG``. They seed defaults
when the default logger, a dispatcher or an appender is constructed; runtime
changes go through the programmatic API.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .formatters import LogFormat
from .levels import LogLevel


class CoreSettings(BaseModel):
    """Core dispatch and default-logger settings."""

    log_level: Literal["DEBUG", "INFO", "WARN", "ERROR"] = Field(
        default="INFO",
        description="Default level of the process-wide default logger",
    )
    default_format: Literal["FULL", "SIMPLE", "MINIMAL", "MINIMALTAGGED"] = Field(
        default="SIMPLE",
        description="Formatter assigned to newly constructed appenders",
    )
    # Structured internal diagnostics for non-fatal errors (worker/appender)
    internal_logging_enabled: bool = Field(
        default=False,
        description="Emit diagnostics on stderr for internal errors",
    )
    enable_metrics: bool = Field(
        default=False,
        description="Enable Prometheus-compatible dispatcher metrics",
    )
    atexit_drain_enabled: bool = Field(
        default=True,
        description="Drain started dispatchers at interpreter exit",
    )
    atexit_drain_timeout_seconds: float = Field(
        default=2.0,
        gt=0.0,
        description="Maximum time to wait for each dispatcher to drain at exit",
    )

    @field_validator("log_level", "default_format", mode="before")
    @classmethod
    def _normalize_case(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().upper()
            if value == "WARNING":
                return "WARN"
        return value

    @property
    def level(self) -> LogLevel:
        return LogLevel.parse(self.log_level)

    @property
    def log_format(self) -> LogFormat:
        return LogFormat(self.default_format)


class Settings(BaseSettings):
    """Top-level configuration model."""

    core: CoreSettings = Field(default_factory=CoreSettings)

    model_config = SettingsConfigDict(
        env_prefix="TAGLOG_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )
