"""Health check endpoint. Always returns HTTP 200 so liveness probes never kill the process."""

from fastapi import APIRouter, Depends

from wave_api.dependencies import get_health_reporter
from wave_api.schemas.health import HealthResponse
from wave_api.services.health import HealthReporter

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health(
    reporter: HealthReporter = Depends(get_health_reporter),  # noqa: B008
) -> HealthResponse:
    """Return process health.

    Executes ``SELECT 1`` against the database.  An unreachable database is
    reported as ``degraded`` in the body; the status code stays 200 because
    the process itself is alive and should keep receiving traffic.
    """
    return await reporter.check()
