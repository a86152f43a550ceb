"""Tests for settings and duration parsing."""

from __future__ import annotations

import tempfile

import pytest
from pydantic import ValidationError

from bws_cache.config import Settings, parse_duration


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("15m", 900.0),
        ("1h30m", 5400.0),
        ("500ms", 0.5),
        ("1.5s", 1.5),
        ("250us", 0.00025),
        ("90", 90.0),
        (" 2h ", 7200.0),
        (30, 30.0),
        (2.5, 2.5),
    ],
)
def test_parse_duration(value: object, expected: float) -> None:
    assert parse_duration(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "soon", "15x", "m15", "15m later", True, None])
def test_parse_duration_rejects_invalid(value: object) -> None:
    with pytest.raises(ValueError):
        parse_duration(value)


class TestSettings:
    """Tests for Settings."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in (
            "PORT",
            "HOST",
            "LOG_LEVEL",
            "ORG_ID",
            "SECRET_TTL",
            "WEB_TTL",
            "UPSTREAM_TIMEOUT",
            "STATE_DIR",
        ):
            monkeypatch.delenv(f"BWS_CACHE_{name}", raising=False)

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.host == "0.0.0.0"
        assert settings.log_level == "info"
        assert settings.org_id == ""
        assert settings.secret_ttl == 900.0
        assert settings.web_ttl == 5.0
        assert settings.upstream_timeout is None
        assert settings.state_dir == tempfile.gettempdir()

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BWS_CACHE_PORT", "9090")
        monkeypatch.setenv("BWS_CACHE_ORG_ID", "org-1")
        monkeypatch.setenv("BWS_CACHE_SECRET_TTL", "1h")
        monkeypatch.setenv("BWS_CACHE_WEB_TTL", "750ms")
        monkeypatch.setenv("BWS_CACHE_UPSTREAM_TIMEOUT", "3s")
        monkeypatch.setenv("BWS_CACHE_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.port == 9090
        assert settings.org_id == "org-1"
        assert settings.secret_ttl == 3600.0
        assert settings.web_ttl == 0.75
        assert settings.upstream_timeout == 3.0
        assert settings.log_level == "debug"

    def test_empty_upstream_timeout_means_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BWS_CACHE_UPSTREAM_TIMEOUT", "")

        assert Settings(_env_file=None).upstream_timeout is None

    def test_accepts_keyword_durations(self) -> None:
        settings = Settings(_env_file=None, secret_ttl="2m", web_ttl=1)

        assert settings.secret_ttl == 120.0
        assert settings.web_ttl == 1.0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"port": 0},
            {"port": 70000},
            {"secret_ttl": "0s"},
            {"secret_ttl": "forever"},
            {"web_ttl": -1},
        ],
    )
    def test_rejects_invalid_values(self, overrides: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)
