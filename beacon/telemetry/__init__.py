"""Telemetry utilities: event emitter, usage metrics and error reporting."""

from .appender import TelemetryLogAppender, attach_error_reporting_appender, detach_appender
from .destination import MalformedDestinationError, parse_destination, resolve_telemetry_destination
from .emitter import Emitter, TelemetryEmitter
from .metrics import Metrics, build_meter_provider

__all__ = [
    "Emitter",
    "TelemetryEmitter",
    "Metrics",
    "build_meter_provider",
    "TelemetryLogAppender",
    "attach_error_reporting_appender",
    "detach_appender",
    "MalformedDestinationError",
    "parse_destination",
    "resolve_telemetry_destination",
]
