"""FastAPI dependencies resolving the process-scoped objects held on ``app.state``."""

from fastapi import Request

from wave_api.config import Settings
from wave_api.services.health import HealthReporter

__all__ = ["get_settings_dep", "get_health_reporter"]


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_health_reporter(request: Request) -> HealthReporter:
    return request.app.state.health_reporter
