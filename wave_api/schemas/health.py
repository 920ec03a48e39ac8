from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "uptime": 3725.42,
                "timestamp": "2026-01-01T12:00:00.000000Z",
            }
        }
    )

    status: Literal["healthy", "degraded"]
    uptime: float  # seconds since process start
    timestamp: datetime  # UTC, serialised as ISO-8601
