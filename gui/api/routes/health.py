"""Version & Metrics — service health payload and Prometheus exposition.

Invariants:
    - GET /version always returns 200 if the process is up
    - GET /metrics serves the default prometheus_client registry
"""

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from gui import __version__
from gui.config import Settings, get_settings

router = APIRouter(include_in_schema=False)

SERVICE_DESCRIPTION = "ui service"


@router.get("/version")
async def version(settings: Settings = Depends(get_settings)):
    """Liveness check with build information."""
    return {
        "status": "pass",
        "version": __version__,
        "commit": "",
        "description": SERVICE_DESCRIPTION,
        "build_time": "",
        "instance_id": settings.ui_instance_id,
    }


@router.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
