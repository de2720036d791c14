"""Resolves the configured telemetry destination onto the live emitter."""

from __future__ import annotations

import logging

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from beacon.core.config import TelemetryConfig
from beacon.telemetry.emitter import Emitter

_logger = logging.getLogger(__name__)

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


class MalformedDestinationError(ValueError):
    """The configured destination string is not a well-formed http(s) URL."""


def parse_destination(value: str) -> AnyHttpUrl:
    try:
        return _URL_ADAPTER.validate_python(value)
    except ValidationError as exc:
        raise MalformedDestinationError(f"Malformed telemetry destination: {value!r}") from exc


def resolve_telemetry_destination(emitter: Emitter, config: TelemetryConfig) -> bool:
    """Point ``emitter`` at the configured destination when telemetry is enabled.

    Returns ``True`` when the emitter was redirected. A malformed destination
    is logged and leaves the emitter exactly as it was.
    """

    if not config.telemetry_enabled or not config.telemetry_destination:
        return False
    try:
        url = parse_destination(config.telemetry_destination)
    except MalformedDestinationError:
        _logger.error("URL malformed; keeping telemetry destination %s", emitter.url, exc_info=True)
        return False
    emitter.change_url(url)
    _logger.info("Telemetry destination set to %s", url)
    return True
