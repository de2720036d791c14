"""Process-wide registry for long-lived service instances."""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")


class MissingServiceError(LookupError):
    """Raised when a required service was never put into the context."""


class Context:
    """Typed service locator shared between independently started subsystems.

    Instances are keyed by the nominal type they are published under, which
    may be a protocol rather than the concrete class. A child context falls
    back to its parent for lookups but only ever writes to itself.
    """

    def __init__(self, parent: Context | None = None) -> None:
        self._parent = parent
        self._services: dict[type, Any] = {}

    def put(self, key: type[T], instance: T) -> None:
        self._services[key] = instance

    def get(self, key: type[T]) -> T | None:
        if key in self._services:
            return self._services[key]
        if self._parent is not None:
            return self._parent.get(key)
        return None

    def require(self, key: type[T]) -> T:
        instance = self.get(key)
        if instance is None:
            raise MissingServiceError(f"No {key.__name__} registered in context")
        return instance

    def __contains__(self, key: type) -> bool:
        return self.get(key) is not None
