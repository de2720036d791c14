"""Ordered startup and shutdown of engine subsystems."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from beacon.core.context import Context

_logger = logging.getLogger(__name__)


class EngineSubsystem(Protocol):
    """Contract every subsystem driven by :class:`Engine` fulfils."""

    @property
    def name(self) -> str:  # pragma: no cover - interface
        ...

    def pre_initialise(self, root_context: Context) -> None:  # pragma: no cover - interface
        ...

    def post_initialise(self, root_context: Context) -> None:  # pragma: no cover - interface
        ...

    def shutdown(self) -> None:  # pragma: no cover - interface
        ...


class Engine:
    """Runs every early phase, then every late phase, then shuts down in reverse."""

    def __init__(self, context: Context, subsystems: Iterable[EngineSubsystem]) -> None:
        self.context = context
        self._subsystems = list(subsystems)
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        for subsystem in self._subsystems:
            _logger.info("Pre-initialising %s subsystem", subsystem.name)
            subsystem.pre_initialise(self.context)
        for subsystem in self._subsystems:
            _logger.info("Post-initialising %s subsystem", subsystem.name)
            subsystem.post_initialise(self.context)
        self._running = True

    def stop(self) -> None:
        if not self._running:
            return
        for subsystem in reversed(self._subsystems):
            _logger.info("Shutting down %s subsystem", subsystem.name)
            subsystem.shutdown()
        self._running = False
