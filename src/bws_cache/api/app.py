"""FastAPI application factory for the secrets cache service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .. import __version__
from ..config import Settings
from ..secrets import SecretResolver, SecretsCacheError, SessionFactory
from .deps import build_resolver
from .metrics import ServiceMetrics
from .middleware import register_middleware
from .routes import health_router, secrets_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    resolver: SecretResolver | None = None,
    session_factory: SessionFactory | None = None,
) -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    settings = settings or Settings()
    resolver = resolver or build_resolver(settings, session_factory)

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # noqa: ARG001 - signature requirement
        try:
            yield
        finally:
            await resolver.reset_cache()
            resolver.gateway.close()
            logger.info("Secrets cache shut down")

    app = FastAPI(
        title="bws-cache",
        description="Read-through cache in front of a remote secrets store",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.resolver = resolver
    app.state.metrics = ServiceMetrics()

    @app.exception_handler(SecretsCacheError)
    async def secrets_error_handler(request: Request, exc: SecretsCacheError) -> PlainTextResponse:
        logger.error(
            "Secret lookup failed: %s",
            exc,
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
        return PlainTextResponse(str(exc), status_code=500)

    register_middleware(app, request_timeout=settings.web_ttl)
    app.include_router(secrets_router, tags=["secrets"])
    app.include_router(health_router, tags=["health"])

    logger.debug("Application created", extra={"org_id": settings.org_id})
    return app


__all__ = ["create_app"]
