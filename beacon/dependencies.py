"""Application dependency wiring."""

from __future__ import annotations

from fastapi import Depends, Request

from beacon.core.config import Settings
from beacon.core.context import Context
from beacon.telemetry import Emitter, Metrics


def get_context(request: Request) -> Context:
    return request.app.state.context


def get_settings(context: Context = Depends(get_context)) -> Settings:
    return context.require(Settings)


def get_emitter(context: Context = Depends(get_context)) -> Emitter:
    return context.require(Emitter)


def get_metrics(context: Context = Depends(get_context)) -> Metrics:
    return context.require(Metrics)
