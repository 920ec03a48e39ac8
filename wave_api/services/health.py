"""Health reporter: database round-trip probe with a degraded fallback."""

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime

from wave_api.database import Database
from wave_api.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

# Captured at import so uptime counts from process start, not from first request.
PROCESS_STARTED_AT: float = time.monotonic()


class HealthReporter:
    """Compute a fresh :class:`HealthResponse` for every liveness query.

    The probe is a single ``SELECT 1`` with no retry.  Any failure, including
    the probe exceeding *probe_timeout* seconds, is logged and reported as
    ``degraded``; :meth:`check` itself never raises, so the endpoint can always
    answer HTTP 200 and the orchestrator keeps the process alive while the
    database is unreachable.
    """

    def __init__(
        self,
        database: Database,
        probe_timeout: float | None = None,
        started_at: float = PROCESS_STARTED_AT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._database = database
        self._probe_timeout = probe_timeout if probe_timeout and probe_timeout > 0 else None
        self._started_at = started_at
        self._clock = clock

    def uptime(self) -> float:
        return max(self._clock() - self._started_at, 0.0)

    async def database_ok(self) -> bool:
        try:
            async with asyncio.timeout(self._probe_timeout):
                await self._database.ping()
        except TimeoutError:
            logger.error("DB check failed: timed out (limit %ss)", self._probe_timeout)
            return False
        except Exception:
            logger.exception("DB check failed")
            return False
        return True

    async def check(self) -> HealthResponse:
        db_ok = await self.database_ok()
        return HealthResponse(
            status="healthy" if db_ok else "degraded",
            uptime=self.uptime(),
            timestamp=datetime.now(UTC),
        )
