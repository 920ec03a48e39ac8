from typing import Literal

from pydantic import BaseModel, ConfigDict


class ServiceInfo(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "service": "API Server",
                "status": "running",
                "version": "1.0.0",
            }
        },
    )

    service: str
    status: Literal["running"] = "running"
    version: str
