"""Router exports for the API module."""

from .health import router as health_router
from .secrets import router as secrets_router

__all__ = [
    "health_router",
    "secrets_router",
]
