"""Utilities for generating identifiers used across the service."""

from __future__ import annotations

import uuid


def new_event_id() -> str:
    return f"ev_{uuid.uuid4().hex}"
