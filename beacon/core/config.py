"""Application configuration via environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class TelemetryConfig(BaseModel):
    """User consent flags and destinations for the two telemetry channels."""

    telemetry_enabled: bool = False
    telemetry_destination: str | None = None
    error_reporting_enabled: bool = False
    error_reporting_destination: str | None = None
    error_reporting_level: LogLevel = "WARNING"

    @field_validator("error_reporting_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class Settings(BaseSettings):
    """Service-wide configuration options."""

    service_name: str = "beacon"
    environment: str = "development"
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    appender_batch_size: int = 1
    appender_timeout_seconds: float = 5.0
    otel_enabled: bool = False
    otel_exporter: str = "console"
    otel_otlp_endpoint: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="beacon_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )


settings = Settings()
