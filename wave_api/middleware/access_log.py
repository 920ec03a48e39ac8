"""Structured JSON access logging.

One record per request with ``method``, ``path``, ``status``, ``duration_ms``
and ``request_id``.  Requests to *quiet_paths* (the health probe by default,
which orchestrators poll every few seconds) are logged at ``DEBUG``; all
others at ``INFO``.
"""

import json
import logging
import time
from collections.abc import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from wave_api.middleware.request_id import REQUEST_ID_CTX

logger = logging.getLogger(__name__)


class AccessLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, quiet_paths: Iterable[str] = ("/health",)) -> None:
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        path = request.url.path
        level = logging.DEBUG if path in self.quiet_paths else logging.INFO
        logger.log(
            level,
            json.dumps(
                {
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": duration_ms,
                    "request_id": REQUEST_ID_CTX.get(),
                }
            ),
        )
        return response
