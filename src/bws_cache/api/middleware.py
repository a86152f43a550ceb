"""HTTP middleware: request ids, access logging and request timeouts."""

from __future__ import annotations

import asyncio
import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from ..logging_config import request_id_var

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS = frozenset({"/", "/metrics", "/ping", "/health"})

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI, *, request_timeout: float) -> None:
    """Attach the service middleware to ``app``.

    The request-id middleware is registered last so it wraps everything
    else, including timeout responses.
    """

    @app.middleware("http")
    async def enforce_timeout(request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), request_timeout)
        except TimeoutError:
            logger.warning(
                "Request timed out",
                extra={"path": request.url.path, "timeout_seconds": request_timeout},
            )
            return PlainTextResponse("Request timed out", status_code=504)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            level = logging.DEBUG if request.url.path in QUIET_PATHS else logging.INFO
            logger.log(
                level,
                "%s %s %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)


__all__ = ["QUIET_PATHS", "REQUEST_ID_HEADER", "register_middleware"]
