"""Log appender that ships records to a remote error-reporting sink."""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Mapping

import requests

from beacon.core.config import Settings
from beacon.core.context import Context

_logger = logging.getLogger(__name__)


class TelemetryLogAppender(logging.Handler):
    """Buffers records as Logstash-style JSON and posts them to each destination.

    The appender is inert until :meth:`start` is called; records handled
    before that, or after :meth:`stop`, are ignored. Records from this
    module and records raised while a batch is in flight are never shipped.

    Batches are posted synchronously from :meth:`emit`, under the handler
    lock. A full batch therefore blocks the logging thread, and any other
    thread logging through this handler, for up to ``timeout`` seconds per
    destination. Keep the level high (WARNING by default) so only rare
    records take that path. Every destination is tried; failures are
    reported together once the batch has been offered to all of them.
    """

    def __init__(
        self,
        *,
        level: int | str = logging.WARNING,
        batch_size: int = 1,
        timeout: float = 5.0,
        custom_fields: Mapping[str, Any] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(level=level)
        self._destinations: list[str] = []
        self._batch_size = max(batch_size, 1)
        self._timeout = timeout
        self._custom_fields = dict(custom_fields or {})
        self._session = session or requests.Session()
        self._buffer: list[dict[str, Any]] = []
        self._buffer_lock = threading.Lock()
        self._shipping = threading.local()
        self._started = False

    @property
    def destinations(self) -> tuple[str, ...]:
        return tuple(self._destinations)

    @property
    def started(self) -> bool:
        return self._started

    def add_destination(self, destination: str) -> None:
        if destination not in self._destinations:
            self._destinations.append(destination)

    def start(self) -> None:
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self.flush()
        self._started = False

    def emit(self, record: logging.LogRecord) -> None:
        if not self._started or record.name == __name__:
            return
        if getattr(self._shipping, "active", False):
            return
        try:
            entry = self._to_entry(record)
            with self._buffer_lock:
                self._buffer.append(entry)
                if len(self._buffer) < self._batch_size:
                    return
                batch = self._take_buffer_locked()
            self._ship(batch)
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        with self._buffer_lock:
            batch = self._take_buffer_locked()
        if not batch or not self._started:
            return
        try:
            self._ship(batch)
        except (requests.RequestException, RuntimeError):
            _logger.warning("Failed to ship %d buffered log records", len(batch), exc_info=True)

    def close(self) -> None:
        try:
            self.stop()
        finally:
            self._session.close()
            super().close()

    def _take_buffer_locked(self) -> list[dict[str, Any]]:
        batch = self._buffer
        self._buffer = []
        return batch

    def _ship(self, batch: list[dict[str, Any]]) -> None:
        body = "\n".join(json.dumps(entry, separators=(",", ":"), default=str) for entry in batch)
        failures: list[str] = []
        self._shipping.active = True
        try:
            for destination in self._destinations:
                try:
                    response = self._session.post(
                        destination,
                        data=body.encode("utf-8"),
                        headers={"Content-Type": "application/x-ndjson"},
                        timeout=self._timeout,
                    )
                except requests.RequestException as exc:
                    failures.append(f"{destination}: {exc}")
                    continue
                if response.status_code >= 400:
                    failures.append(f"{destination}: HTTP {response.status_code}")
        finally:
            self._shipping.active = False
        if failures:
            raise RuntimeError("Error reporting sinks rejected records: " + "; ".join(failures))

    def _to_entry(self, record: logging.LogRecord) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "@timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "@version": "1",
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
            "thread_name": record.threadName,
        }
        if record.exc_info:
            entry["stack_trace"] = logging.Formatter().formatException(record.exc_info)
        entry.update(self._custom_fields)
        return entry


def attach_error_reporting_appender(
    root_context: Context, logger: logging.Logger | None = None
) -> TelemetryLogAppender:
    """Register the appender on ``logger`` and start it only when the user opted in."""

    app_settings = root_context.require(Settings)
    config = app_settings.telemetry
    target = logger if logger is not None else logging.getLogger()

    appender = TelemetryLogAppender(
        level=config.error_reporting_level,
        batch_size=app_settings.appender_batch_size,
        timeout=app_settings.appender_timeout_seconds,
        custom_fields={"service": app_settings.service_name, "environment": app_settings.environment},
    )
    target.addHandler(appender)

    if config.error_reporting_enabled and config.error_reporting_destination:
        appender.add_destination(config.error_reporting_destination)
        appender.start()
        _logger.info("Error reporting enabled, shipping to %s", config.error_reporting_destination)
    return appender


def detach_appender(appender: TelemetryLogAppender, logger: logging.Logger | None = None) -> None:
    target = logger if logger is not None else logging.getLogger()
    target.removeHandler(appender)
    appender.close()
