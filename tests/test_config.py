import pytest
from pydantic import ValidationError

from beacon.core.config import Settings, TelemetryConfig


def test_defaults_keep_both_channels_disabled():
    custom = Settings(_env_file=None)
    assert custom.telemetry.telemetry_enabled is False
    assert custom.telemetry.telemetry_destination is None
    assert custom.telemetry.error_reporting_enabled is False
    assert custom.telemetry.error_reporting_destination is None
    assert custom.telemetry.error_reporting_level == "WARNING"


def test_nested_telemetry_settings_from_environment(monkeypatch):
    monkeypatch.setenv("BEACON_TELEMETRY__TELEMETRY_ENABLED", "true")
    monkeypatch.setenv("BEACON_TELEMETRY__TELEMETRY_DESTINATION", "http://collector.example.com/events")
    monkeypatch.setenv("BEACON_TELEMETRY__ERROR_REPORTING_ENABLED", "1")
    monkeypatch.setenv("BEACON_OTEL_EXPORTER", "otlp")

    custom = Settings(_env_file=None)

    assert custom.telemetry.telemetry_enabled is True
    assert custom.telemetry.telemetry_destination == "http://collector.example.com/events"
    assert custom.telemetry.error_reporting_enabled is True
    assert custom.telemetry.error_reporting_destination is None
    assert custom.otel_exporter == "otlp"


def test_error_reporting_level_is_normalised():
    custom = Settings(_env_file=None, telemetry=TelemetryConfig(error_reporting_level=" error "))
    assert custom.telemetry.error_reporting_level == "ERROR"


def test_unknown_error_reporting_level_fails_when_settings_load(monkeypatch):
    monkeypatch.setenv("BEACON_TELEMETRY__ERROR_REPORTING_LEVEL", "verbose")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
