"""Global exception handlers returning a consistent JSON error envelope.

Register with ``app.add_exception_handler``.  Every body follows
:class:`~wave_api.schemas.common.ErrorResponse`.  Without the catch-all
handler an exception escaping a route would surface as a bare 500 text
response; with it the client always gets JSON and the traceback stays in the
server log.

The current routes take no parameters, so :func:`validation_exception_handler`
and :class:`~wave_api.schemas.common.ErrorDetail` only fire once a route with
path, query or body parameters is added.  They are registered now so such a
route gets the same envelope; ``tests/test_error_handler.py`` drives them
through a parameterised test route.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from wave_api.schemas.common import ErrorCode, ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

_STATUS_TO_CODE: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "UNPROCESSABLE_ENTITY",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def _code_for_status(status_code: int) -> str:
    return _STATUS_TO_CODE.get(status_code, f"HTTP_{status_code}")


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Convert ``HTTPException`` (including routing 404/405) to the error envelope.

    Response headers set on the exception, such as ``Allow`` on a 405, are
    forwarded.
    """
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    body = ErrorResponse(error=ErrorCode(code=_code_for_status(exc.status_code), message=detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(),
        headers=dict(exc.headers) if exc.headers else None,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details: list[ErrorDetail] = []
    for error in exc.errors():
        # Strip the leading "body" / "query" / "path" segment of ``loc``.
        loc = error["loc"]
        field_parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
        field = ".".join(field_parts) if field_parts else str(loc[-1]) if loc else "unknown"
        details.append(ErrorDetail(field=field, message=error["msg"]))

    body = ErrorResponse(
        error=ErrorCode(
            code="UNPROCESSABLE_ENTITY",
            message="Request validation failed",
            details=details,
        )
    )
    return JSONResponse(
        status_code=422,
        content=body.model_dump(),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback at ERROR and return a generic ``INTERNAL_ERROR``."""
    logger.error(
        "Unhandled %s on %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    body = ErrorResponse(
        error=ErrorCode(code="INTERNAL_ERROR", message="An internal server error occurred")
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )
