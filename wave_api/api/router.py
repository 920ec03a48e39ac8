"""Top-level router: mounts the service and health routers at the root path.

Future job and webhook routers (e.g. ``POST /api/jobs/cleanup-old-messages``)
are mounted here.
"""

from fastapi import APIRouter

from wave_api.api.health import router as health_router
from wave_api.api.root import router as root_router

api_router = APIRouter()
api_router.include_router(root_router)
api_router.include_router(health_router)
