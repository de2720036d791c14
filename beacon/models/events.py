"""Telemetry event payloads sent by the emitter."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from beacon.core.identifiers import new_event_id

PAYLOAD_SCHEMA = "iglu:com.snowplowanalytics.snowplow/payload_data/jsonschema/1-0-4"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TelemetryEvent(BaseModel):
    event_id: str = Field(default_factory=new_event_id)
    name: str
    timestamp: datetime = Field(default_factory=_utcnow)
    data: dict[str, Any] = Field(default_factory=dict)


def build_payload(events: list[TelemetryEvent]) -> dict[str, Any]:
    """Wrap a batch of events in the collector's payload envelope."""

    return {
        "schema": PAYLOAD_SCHEMA,
        "data": [event.model_dump(mode="json") for event in events],
    }
