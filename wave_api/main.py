import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from wave_api.api.router import api_router
from wave_api.config import Settings, get_settings
from wave_api.database import Database
from wave_api.middleware.access_log import AccessLogMiddleware
from wave_api.middleware.error_handler import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from wave_api.middleware.request_id import RequestIdMiddleware
from wave_api.services.health import HealthReporter
from wave_api.services.shutdown import ShutdownCoordinator

logger = logging.getLogger(__name__)

_OPENAPI_TAGS = [
    {"name": "Service", "description": "Service descriptor"},
    {"name": "Health", "description": "Liveness probe"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    settings: Settings = app.state.settings
    coordinator: ShutdownCoordinator = app.state.shutdown_coordinator

    base_url = f"http://{settings.host}:{settings.port}"
    logger.info("%s started", settings.app_name)
    logger.info("HTTP: %s", base_url)
    logger.info("Health: %s/health", base_url)

    yield

    # Reached when the server stops on its own; a no-op after a signal-driven shutdown.
    await coordinator.shutdown()


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    *,
    stop_server: Callable[[], object] | None = None,
) -> FastAPI:
    """Build the application and the process-scoped objects it owns.

    The database handle, health reporter and shutdown coordinator are created
    once here and kept on ``app.state``; route handlers reach them through the
    dependencies in :mod:`wave_api.dependencies`.  Pass *database* to
    substitute the store (tests use a stub).  *stop_server* is what the
    shutdown coordinator calls after a signal-driven release; signal capture
    itself is wired by the entry point in :mod:`wave_api.__main__`.
    """
    settings = settings or get_settings()
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title=settings.app_name,
        description="API & background jobs server",
        version=settings.version,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_tags=_OPENAPI_TAGS,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.health_reporter = HealthReporter(
        database, probe_timeout=settings.db_probe_timeout_seconds
    )
    app.state.shutdown_coordinator = ShutdownCoordinator(database, stop_server=stop_server)

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # -----------------------------------------------------------------------
    # Middleware (Starlette LIFO: last add_middleware call runs outermost)
    # -----------------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Reads REQUEST_ID_CTX, so it must run inside RequestIdMiddleware.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)
    return app
