import logging

import pytest

from beacon.core.config import TelemetryConfig
from beacon.telemetry.destination import (
    MalformedDestinationError,
    parse_destination,
    resolve_telemetry_destination,
)
from beacon.telemetry.emitter import TelemetryEmitter


class _NullSession:
    def post(self, url, **kwargs):  # pragma: no cover - never reached
        raise AssertionError("no network expected")

    def close(self):
        return None


def test_parse_destination_accepts_urls():
    url = parse_destination("https://collector.example.com:8443/com.snowplowanalytics.snowplow/tp2")
    assert url.scheme == "https"
    assert url.host == "collector.example.com"
    assert url.port == 8443


@pytest.mark.parametrize(
    "value",
    [
        "not a url",
        "collector.example.com/events",
        "",
        "localhost:8080",
        "collector.example.com:9000/events",
        "ftp://collector.example.com/events",
    ],
)
def test_parse_destination_rejects_malformed(value):
    with pytest.raises(MalformedDestinationError):
        parse_destination(value)


def test_resolver_redirects_emitter_in_place():
    emitter = TelemetryEmitter(session=_NullSession())
    config = TelemetryConfig(telemetry_enabled=True, telemetry_destination="http://collector.example.com/events")

    assert resolve_telemetry_destination(emitter, config) is True
    assert str(emitter.url) == "http://collector.example.com/events"


def test_resolver_ignores_destination_when_disabled():
    emitter = TelemetryEmitter(session=_NullSession())
    config = TelemetryConfig(telemetry_enabled=False, telemetry_destination="http://collector.example.com/events")

    assert resolve_telemetry_destination(emitter, config) is False
    assert emitter.url is None


def test_malformed_destination_is_logged_and_emitter_untouched(caplog):
    original = parse_destination("http://original.example.com/collect")
    emitter = TelemetryEmitter(original, session=_NullSession())
    config = TelemetryConfig(telemetry_enabled=True, telemetry_destination="not a url")

    with caplog.at_level(logging.ERROR, logger="beacon.telemetry.destination"):
        assert resolve_telemetry_destination(emitter, config) is False

    assert emitter.url is original
    [record] = [r for r in caplog.records if r.name == "beacon.telemetry.destination"]
    assert record.levelno == logging.ERROR
    assert "URL malformed" in record.getMessage()
    assert record.exc_info is not None
    assert isinstance(record.exc_info[1], MalformedDestinationError)


@pytest.mark.parametrize("value", ["localhost:8080", "collector.example.com:9000/events"])
def test_host_port_without_scheme_does_not_redirect_emitter(value, caplog):
    emitter = TelemetryEmitter(session=_NullSession())
    config = TelemetryConfig(telemetry_enabled=True, telemetry_destination=value)

    with caplog.at_level(logging.ERROR, logger="beacon.telemetry.destination"):
        assert resolve_telemetry_destination(emitter, config) is False

    assert emitter.url is None
    assert "URL malformed" in caplog.text
