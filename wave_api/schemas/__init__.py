from .common import ErrorCode, ErrorDetail, ErrorResponse
from .health import HealthResponse
from .service import ServiceInfo

__all__ = [
    # common
    "ErrorDetail",
    "ErrorCode",
    "ErrorResponse",
    # health
    "HealthResponse",
    # service
    "ServiceInfo",
]
