"""Application entrypoint for the Beacon host service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from beacon.core.config import Settings, settings
from beacon.core.context import Context
from beacon.core.engine import Engine
from beacon.routers import telemetry
from beacon.subsystems.telemetry import TelemetrySubsystem


def build_engine(app_settings: Settings) -> Engine:
    context = Context()
    context.put(Settings, app_settings)
    return Engine(context, [TelemetrySubsystem()])


def create_app(app_settings: Settings | None = None) -> FastAPI:
    resolved_settings = app_settings if app_settings is not None else settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(resolved_settings)
        engine.start()
        app.state.context = engine.context
        yield
        engine.stop()

    app = FastAPI(
        title="Beacon",
        description="Host service wiring consent-driven telemetry and error reporting.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(telemetry.router)

    @app.get("/healthz", tags=["health"])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
