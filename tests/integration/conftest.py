"""Fixtures for HTTP-level tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fakes import ORG_ID, FakeSecretsService
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from bws_cache.api import create_app
from bws_cache.config import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(_env_file=None, org_id=ORG_ID, secret_ttl=60, state_dir=str(tmp_path))


@pytest.fixture
def test_app(settings: Settings, service: FakeSecretsService) -> FastAPI:
    return create_app(settings, session_factory=service)


@pytest_asyncio.fixture
async def test_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client calling the application in-process."""

    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client
