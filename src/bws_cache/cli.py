"""Command line entry point for the secrets cache service."""

from __future__ import annotations

import logging

import click
from pydantic import ValidationError

from . import __version__
from .config import Settings
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


@click.group()
def cli() -> None:
    """Caching server for a remote secrets store."""


@cli.command()
def start() -> None:
    """Start the HTTP service."""

    try:
        settings = Settings()
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc

    configure_logging(settings.log_level)
    logger.info("Starting")

    if not settings.org_id:
        logger.error("Org ID must be specified")
        raise SystemExit(1)

    import uvicorn

    from .api import create_app

    logger.info("Server starting on port %d", settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=logging.getLevelName(logging.getLogger().level).lower(),
        log_config=None,
    )


@cli.command()
def version() -> None:
    """Display the build version."""

    click.echo(__version__)


__all__ = ["cli"]
