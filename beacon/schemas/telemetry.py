from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class EventRequest(BaseModel):
    name: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class EventAccepted(BaseModel):
    event_id: str


class TelemetryStatus(BaseModel):
    telemetry_enabled: bool
    telemetry_destination: str | None = None
    error_reporting_enabled: bool
    error_reporting_destination: str | None = None
