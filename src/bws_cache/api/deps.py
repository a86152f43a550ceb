"""Reusable FastAPI dependency providers for the REST API layer."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Request

from ..config import Settings
from ..secrets import (
    MissingTokenError,
    SecretCache,
    SecretResolver,
    SessionFactory,
    SessionGateway,
    bitwarden_session_factory,
)
from .metrics import ServiceMetrics

BEARER_PREFIX = "Bearer "


def build_resolver(
    settings: Settings, session_factory: SessionFactory | None = None
) -> SecretResolver:
    """Wire the caches and the upstream gateway described by ``settings``."""

    cache = SecretCache(settings.secret_ttl, maxsize=settings.cache_max_size)
    gateway = SessionGateway(
        session_factory
        or bitwarden_session_factory(
            api_url=settings.api_url, identity_url=settings.identity_url
        ),
        state_dir=settings.state_dir,
        timeout=settings.upstream_timeout,
    )
    return SecretResolver(cache, gateway)


def get_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""

    return request.app.state.settings


def get_resolver(request: Request) -> SecretResolver:
    """Return the process-wide secret resolver."""

    return request.app.state.resolver


def get_metrics(request: Request) -> ServiceMetrics:
    """Return the application's metrics collector."""

    return request.app.state.metrics


def get_bearer_token(authorization: Annotated[str | None, Header()] = None) -> str:
    """Extract the bearer credential from the ``Authorization`` header."""

    header = authorization or ""
    token = header.removeprefix(BEARER_PREFIX)
    if not header or not token:
        raise MissingTokenError()
    return token


SettingsDep = Annotated[Settings, Depends(get_settings)]
ResolverDep = Annotated[SecretResolver, Depends(get_resolver)]
MetricsDep = Annotated[ServiceMetrics, Depends(get_metrics)]
BearerToken = Annotated[str, Depends(get_bearer_token)]


__all__ = [
    "BEARER_PREFIX",
    "BearerToken",
    "MetricsDep",
    "ResolverDep",
    "SettingsDep",
    "build_resolver",
    "get_bearer_token",
    "get_metrics",
    "get_resolver",
    "get_settings",
]
