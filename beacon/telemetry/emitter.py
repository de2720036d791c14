"""Event emitter that ships telemetry events to a remote collector."""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Protocol

import requests
from pydantic import AnyHttpUrl

from beacon.models.events import TelemetryEvent, build_payload

_logger = logging.getLogger(__name__)


class Emitter(Protocol):
    """Capability contract published into the context.

    Reconfiguration and release are part of the contract so holders never
    need to know which concrete emitter they were given.
    """

    @property
    def url(self) -> AnyHttpUrl | None:  # pragma: no cover - interface
        ...

    def emit(self, event: TelemetryEvent | Mapping[str, Any]) -> None:  # pragma: no cover - interface
        ...

    def change_url(self, url: AnyHttpUrl) -> None:  # pragma: no cover - interface
        ...

    def flush(self) -> None:  # pragma: no cover - interface
        ...

    def close(self) -> None:  # pragma: no cover - interface
        ...


class TelemetryEmitter:
    """Buffers events and posts them in batches to the collector URL.

    Without a URL the emitter is inert: events are accepted and discarded on
    flush. Transport failures are logged and the batch is dropped.
    """

    def __init__(
        self,
        url: AnyHttpUrl | None = None,
        *,
        batch_size: int = 10,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._url = url
        self._batch_size = max(batch_size, 1)
        self._timeout = timeout
        self._session = session or requests.Session()
        self._buffer: list[TelemetryEvent] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def url(self) -> AnyHttpUrl | None:
        return self._url

    @property
    def closed(self) -> bool:
        return self._closed

    def change_url(self, url: AnyHttpUrl) -> None:
        with self._lock:
            self._url = url

    def emit(self, event: TelemetryEvent | Mapping[str, Any]) -> None:
        if not isinstance(event, TelemetryEvent):
            event = TelemetryEvent.model_validate(event)
        with self._lock:
            if self._closed:
                _logger.warning("Dropping event %s emitted after close", event.name)
                return
            self._buffer.append(event)
            if len(self._buffer) >= self._batch_size:
                self._flush_locked()

    def flush(self) -> None:
        with self._lock:
            self._flush_locked()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._flush_locked()
            self._closed = True
        self._session.close()

    def _flush_locked(self) -> None:
        if not self._buffer:
            return
        batch = self._buffer
        self._buffer = []
        if self._url is None:
            _logger.debug("No collector configured; discarding %d events", len(batch))
            return
        try:
            response = self._session.post(
                str(self._url),
                json=build_payload(batch),
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException:
            _logger.warning("Failed to send %d events to %s", len(batch), self._url, exc_info=True)
            return
        if response.status_code >= 400:
            _logger.warning(
                "Collector rejected %d events (%s): %s", len(batch), response.status_code, response.text
            )
