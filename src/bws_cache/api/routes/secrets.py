"""Secret lookup and cache reset endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response

from ..deps import BearerToken, MetricsDep, ResolverDep, SettingsDep

router = APIRouter()

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


@router.get("/id/{secret_id}")
async def get_secret_by_id(
    secret_id: str,
    token: BearerToken,
    resolver: ResolverDep,
    metrics: MetricsDep,
) -> Response:
    """Return the cached or freshly fetched secret with ``secret_id``."""

    logger.debug("Getting secret by ID", extra={"secret_id": secret_id})
    with metrics.track("id"):
        body = await resolver.get_by_id(secret_id, token)
    return Response(content=body, media_type=JSON_MEDIA_TYPE)


@router.get("/key/{secret_key}")
async def get_secret_by_key(
    secret_key: str,
    token: BearerToken,
    resolver: ResolverDep,
    settings: SettingsDep,
    metrics: MetricsDep,
) -> Response:
    """Return the secret named ``secret_key`` in the configured organization."""

    logger.debug("Searching for key", extra={"secret_key": secret_key})
    with metrics.track("key"):
        body = await resolver.get_by_key(secret_key, settings.org_id, token)
    return Response(content=body, media_type=JSON_MEDIA_TYPE)


@router.get("/reset")
async def reset_cache(resolver: ResolverDep, metrics: MetricsDep) -> Response:
    """Discard every cached key mapping and secret."""

    metrics.record_request("cache")
    await resolver.reset_cache()
    logger.info("Cache reset")
    return Response(status_code=200)


__all__ = ["router"]
