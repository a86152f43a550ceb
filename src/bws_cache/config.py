"""Runtime configuration for the secrets cache service."""

from __future__ import annotations

import re
import tempfile
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Any) -> float:
    """Convert ``"15m"``, ``"1h30m"``, ``"500ms"`` or a number into seconds."""

    if isinstance(value, bool):
        raise ValueError("duration must be a number of seconds or a string like '15m'")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise ValueError("duration must be a number of seconds or a string like '15m'")

    text = value.strip()
    try:
        return float(text)
    except ValueError:
        pass

    position = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()
    if position == 0 or position != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return total


class Settings(BaseSettings):
    """Settings used to build the cache, gateway and HTTP service."""

    port: int = Field(default=8080, ge=1, le=65535, description="HTTP listen port")
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    log_level: str = Field(default="info", description="debug, info, warn or error")
    org_id: str = Field(default="", description="Organization whose secrets are served")
    secret_ttl: float = Field(
        default=15 * 60,
        gt=0,
        description="TTL (seconds) applied to cached key mappings and secrets",
    )
    web_ttl: float = Field(
        default=5.0,
        gt=0,
        description="Maximum time (seconds) spent serving a single request",
    )
    cache_max_size: int = Field(
        default=10_000,
        ge=1,
        description="Maximum number of entries held by each cache",
    )
    upstream_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Deadline (seconds) for a single upstream session",
    )
    state_dir: str = Field(
        default_factory=tempfile.gettempdir,
        description="Directory holding the upstream session-state file",
    )
    api_url: str | None = Field(default=None, description="Upstream API URL override")
    identity_url: str | None = Field(default=None, description="Upstream identity URL override")

    model_config = SettingsConfigDict(
        env_prefix="BWS_CACHE_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("secret_ttl", "web_ttl", "upstream_timeout", mode="before")
    @classmethod
    def _parse_durations(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return parse_duration(value)


__all__ = ["Settings", "parse_duration"]
