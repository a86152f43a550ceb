"""Health, heartbeat and metrics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse

from ... import __version__
from ..deps import MetricsDep

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Return a simple service health indicator."""

    return {"status": "healthy", "version": __version__}


@router.get("/ping", response_class=PlainTextResponse)
async def ping() -> str:
    """Heartbeat for load balancers."""

    return "."


@router.get("/metrics")
async def metrics_endpoint(metrics: MetricsDep) -> Response:
    """Prometheus metrics endpoint."""

    payload, content_type = metrics.render()
    return Response(content=payload, media_type=content_type)


__all__ = ["router"]
