"""Root endpoint: static service descriptor."""

from fastapi import APIRouter, Depends

from wave_api.config import Settings
from wave_api.dependencies import get_settings_dep
from wave_api.schemas.service import ServiceInfo

router = APIRouter(tags=["Service"])


@router.get("/", response_model=ServiceInfo)
async def root(settings: Settings = Depends(get_settings_dep)) -> ServiceInfo:  # noqa: B008
    """Return service name, running status and version.  No side effects."""
    return ServiceInfo(service=settings.app_name, version=settings.version)
