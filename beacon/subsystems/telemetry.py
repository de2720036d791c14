"""Telemetry engine subsystem.

Creates the event emitter and the usage metrics collector, publishes both
into the root context so any later code can look them up, wires error
reporting and the telemetry destination from user configuration, and
releases everything again on shutdown.
"""

from __future__ import annotations

import logging

from beacon.core.config import Settings
from beacon.core.context import Context
from beacon.telemetry.appender import (
    TelemetryLogAppender,
    attach_error_reporting_appender,
    detach_appender,
)
from beacon.telemetry.destination import resolve_telemetry_destination
from beacon.telemetry.emitter import Emitter, TelemetryEmitter
from beacon.telemetry.metrics import Metrics


class TelemetrySubsystem:
    """Owns the emitter and metrics handles for the telemetry lifetime."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._target_logger = logger
        self._metrics: Metrics | None = None
        self._emitter: Emitter | None = None
        self._appender: TelemetryLogAppender | None = None

    @property
    def name(self) -> str:
        return "Telemetry"

    @property
    def emitter(self) -> Emitter | None:
        return self._emitter

    @property
    def metrics(self) -> Metrics | None:
        return self._metrics

    @property
    def appender(self) -> TelemetryLogAppender | None:
        return self._appender

    def pre_initialise(self, root_context: Context) -> None:
        # Metrics live in the context so the UI can show their values.
        self._metrics = Metrics()
        root_context.put(Metrics, self._metrics)

        # Any code can look the emitter up later to send its own events.
        self._emitter = TelemetryEmitter()
        root_context.put(Emitter, self._emitter)

    def post_initialise(self, root_context: Context) -> None:
        if self._metrics is None or self._emitter is None:
            raise RuntimeError("Telemetry subsystem post-initialised before pre-initialise")
        self._metrics.initialise(root_context)

        self._appender = attach_error_reporting_appender(root_context, logger=self._target_logger)
        resolve_telemetry_destination(self._emitter, root_context.require(Settings).telemetry)

    def shutdown(self) -> None:
        if self._emitter is None:
            raise RuntimeError("Telemetry subsystem shut down before it was started")
        if self._appender is not None:
            detach_appender(self._appender, logger=self._target_logger)
            self._appender = None
        self._emitter.close()
        if self._metrics is not None:
            self._metrics.shutdown()
