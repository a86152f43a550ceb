"""Pytest fixtures for bws-cache tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from fakes import TTL_SECONDS, FakeClock, FakeSecretsService, make_record

from bws_cache.secrets import SecretCache, SecretResolver, SessionGateway


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service() -> FakeSecretsService:
    return FakeSecretsService(
        [
            make_record("id-1", "db-pass", "hunter2"),
            make_record("id-2", "api-key", "sk-live-123"),
        ]
    )


@pytest.fixture
def cache(clock: FakeClock) -> SecretCache:
    return SecretCache(TTL_SECONDS, timer=clock)


@pytest.fixture
def gateway(service: FakeSecretsService, tmp_path: Path) -> SessionGateway:
    return SessionGateway(service, state_dir=str(tmp_path))


@pytest.fixture
def resolver(cache: SecretCache, gateway: SessionGateway) -> SecretResolver:
    return SecretResolver(cache, gateway)
