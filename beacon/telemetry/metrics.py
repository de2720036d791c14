"""Usage metrics collector backed by OpenTelemetry."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from opentelemetry.metrics import Counter, Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from beacon.core.config import Settings
from beacon.core.context import Context
from beacon.models.metrics import MetricsSnapshot, SystemContextMetric

_logger = logging.getLogger(__name__)


def build_meter_provider(app_settings: Settings) -> MeterProvider:
    exporter_name = app_settings.otel_exporter.lower().strip()
    metric_readers = []

    if exporter_name == "console":
        metric_readers.append(PeriodicExportingMetricReader(ConsoleMetricExporter()))
    elif exporter_name == "otlp":
        try:
            from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError(
                "OTLP exporter selected but opentelemetry-exporter-otlp is not installed."
            ) from exc
        endpoint = app_settings.otel_otlp_endpoint
        exporter = OTLPMetricExporter(endpoint=endpoint) if endpoint else OTLPMetricExporter()
        metric_readers.append(PeriodicExportingMetricReader(exporter))
    else:
        _logger.warning("Unsupported OTEL exporter '%s'; defaulting to console", exporter_name)
        metric_readers.append(PeriodicExportingMetricReader(ConsoleMetricExporter()))

    return MeterProvider(
        metric_readers=metric_readers,
        resource=Resource.create({"service.name": app_settings.service_name}),
    )


class Metrics:
    """Aggregates local usage counters for display and optional export.

    Counters are always kept in memory so the host can render them; they are
    mirrored to OpenTelemetry only when ``otel_enabled`` is set.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, int] = {}
        self._instruments: dict[str, Counter] = {}
        self._system: SystemContextMetric | None = None
        self._provider: MeterProvider | None = None
        self._meter: Meter | None = None
        self._initialised = False

    @property
    def initialised(self) -> bool:
        return self._initialised

    @property
    def system(self) -> SystemContextMetric | None:
        return self._system

    def initialise(self, root_context: Context) -> None:
        app_settings = root_context.require(Settings)
        self._system = SystemContextMetric.collect(app_settings.service_name, app_settings.environment)
        if app_settings.otel_enabled and self._provider is None:
            self._provider = build_meter_provider(app_settings)
            self._meter = self._provider.get_meter(app_settings.service_name)
        self._initialised = True

    def increment(self, name: str, amount: int = 1) -> None:
        if amount <= 0:
            return
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + amount
            instrument = self._instrument_locked(name)
        if instrument is not None:
            instrument.add(amount)

    def get(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            counters = dict(self._counters)
        return MetricsSnapshot(
            initialised=self._initialised,
            captured_at=datetime.now(timezone.utc),
            system=self._system,
            counters=counters,
        )

    def shutdown(self) -> None:
        if self._provider is None:
            return
        try:
            self._provider.shutdown()
        except Exception:  # pragma: no cover
            _logger.exception("Failed to shutdown metrics provider")
        finally:
            self._provider = None
            self._meter = None
            self._instruments.clear()

    def _instrument_locked(self, name: str) -> Counter | None:
        if self._meter is None:
            return None
        instrument = self._instruments.get(name)
        if instrument is None:
            instrument = self._meter.create_counter(name=name, unit="1")
            self._instruments[name] = instrument
        return instrument
