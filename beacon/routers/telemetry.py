from __future__ import annotations

from fastapi import APIRouter, Depends, status

from beacon.core.config import Settings
from beacon.dependencies import get_emitter, get_metrics, get_settings
from beacon.models.events import TelemetryEvent
from beacon.models.metrics import MetricsSnapshot
from beacon.schemas.telemetry import EventAccepted, EventRequest, TelemetryStatus
from beacon.telemetry import Emitter, Metrics

router = APIRouter(prefix="/telemetry", tags=["telemetry"])


@router.get("/status", response_model=TelemetryStatus)
def telemetry_status(
    app_settings: Settings = Depends(get_settings),
    emitter: Emitter = Depends(get_emitter),
) -> TelemetryStatus:
    config = app_settings.telemetry
    return TelemetryStatus(
        telemetry_enabled=config.telemetry_enabled,
        telemetry_destination=str(emitter.url) if emitter.url is not None else None,
        error_reporting_enabled=config.error_reporting_enabled,
        error_reporting_destination=config.error_reporting_destination,
    )


@router.get("/metrics", response_model=MetricsSnapshot)
def metrics_snapshot(metrics: Metrics = Depends(get_metrics)) -> MetricsSnapshot:
    return metrics.snapshot()


@router.post("/events", response_model=EventAccepted, status_code=status.HTTP_202_ACCEPTED)
def emit_event(
    request: EventRequest,
    emitter: Emitter = Depends(get_emitter),
    metrics: Metrics = Depends(get_metrics),
) -> EventAccepted:
    event = TelemetryEvent(name=request.name, data=request.data)
    emitter.emit(event)
    metrics.increment("telemetry.events")
    return EventAccepted(event_id=event.event_id)
