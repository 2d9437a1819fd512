"""Monitoring endpoints."""
from fastapi import APIRouter
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from starlette.responses import Response

from carrental.config import settings

router = APIRouter(tags=["monitoring"])
# Mounted only when metrics are enabled.
metrics_router = APIRouter(tags=["monitoring"])


@router.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@metrics_router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )
