import logging

import pytest

from beacon.core.config import Settings
from beacon.core.context import Context, MissingServiceError
from beacon.telemetry.metrics import Metrics, build_meter_provider


def _context(**overrides) -> Context:
    context = Context()
    context.put(Settings, Settings(_env_file=None, **overrides))
    return context


def test_initialise_captures_system_context():
    metrics = Metrics()
    assert not metrics.initialised

    metrics.initialise(_context(service_name="beacon-test", environment="ci"))

    assert metrics.initialised
    assert metrics.system is not None
    assert metrics.system.service == "beacon-test"
    assert metrics.system.environment == "ci"
    assert metrics.system.python_version


def test_initialise_requires_settings():
    with pytest.raises(MissingServiceError):
        Metrics().initialise(Context())


def test_counters_accumulate_and_snapshot_is_a_copy():
    metrics = Metrics()
    metrics.initialise(_context())

    metrics.increment("telemetry.events")
    metrics.increment("telemetry.events", 2)
    metrics.increment("telemetry.events", 0)
    snapshot = metrics.snapshot()
    metrics.increment("telemetry.events")

    assert snapshot.counters == {"telemetry.events": 3}
    assert metrics.get("telemetry.events") == 4
    assert metrics.get("unknown") == 0


def test_otel_provider_is_built_when_enabled_and_released_on_shutdown():
    metrics = Metrics()
    metrics.initialise(_context(otel_enabled=True, otel_exporter="console"))

    metrics.increment("sessions.started")
    assert metrics.get("sessions.started") == 1

    metrics.shutdown()
    metrics.increment("sessions.started")
    assert metrics.get("sessions.started") == 2


def test_unsupported_exporter_falls_back_to_console(caplog):
    with caplog.at_level(logging.WARNING, logger="beacon.telemetry.metrics"):
        provider = build_meter_provider(Settings(_env_file=None, otel_exporter="carrier-pigeon"))
    try:
        assert "Unsupported OTEL exporter 'carrier-pigeon'" in caplog.text
    finally:
        provider.shutdown()
