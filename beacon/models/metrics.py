"""Usage metric models exposed to the host UI."""

from __future__ import annotations

import os
import platform
from datetime import datetime

from pydantic import BaseModel, Field


class SystemContextMetric(BaseModel):
    """Describes the machine the service is running on."""

    service: str
    environment: str
    os_name: str
    os_version: str
    architecture: str
    python_version: str
    cpu_count: int | None = None

    @classmethod
    def collect(cls, service: str, environment: str) -> "SystemContextMetric":
        return cls(
            service=service,
            environment=environment,
            os_name=platform.system(),
            os_version=platform.release(),
            architecture=platform.machine(),
            python_version=platform.python_version(),
            cpu_count=os.cpu_count(),
        )


class MetricsSnapshot(BaseModel):
    initialised: bool
    captured_at: datetime
    system: SystemContextMetric | None = None
    counters: dict[str, int] = Field(default_factory=dict)
