"""TTL caches holding key → id mappings and serialized secrets."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, MutableMapping
from importlib import import_module
from typing import Generic, TypeVar, cast

T = TypeVar("T")

DEFAULT_MAX_SIZE = 10_000

logger = logging.getLogger(__name__)


class TTLStore(Generic[T]):
    """Async-friendly wrapper around ``cachetools.TTLCache``.

    Every entry expires ``ttl_seconds`` after it was written. Reads do not
    extend an entry's lifetime unless ``touch_on_hit`` is enabled, so all
    entries written in one batch go stale together.
    """

    def __init__(
        self,
        ttl_seconds: float,
        *,
        maxsize: int = DEFAULT_MAX_SIZE,
        touch_on_hit: bool = False,
        timer: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        try:
            ttl_cache_cls = getattr(import_module("cachetools"), "TTLCache")
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError("cachetools must be installed to enable secrets caching") from exc

        self.name = name
        self.ttl_seconds = ttl_seconds
        self.maxsize = maxsize
        self.touch_on_hit = touch_on_hit
        self._cache: MutableMapping[str, T] = cast(
            MutableMapping[str, T],
            ttl_cache_cls(maxsize=maxsize, ttl=ttl_seconds, timer=timer),
        )
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._cache)

    async def has(self, key: str) -> bool:
        """Return ``True`` when an unexpired entry exists for ``key``."""

        async with self._lock:
            return key in self._cache

    async def get(self, key: str) -> T | None:
        """Return a cached value if it exists and is still valid."""

        async with self._lock:
            value = self._cache.get(key)
            if value is not None and self.touch_on_hit:
                self._cache[key] = value
        if value is None:
            logger.debug("Cache miss", extra={"cache": self.name, "cache_key": key})
        return value

    async def set(self, key: str, value: T) -> None:
        """Store a value, replacing any previous entry and restarting its TTL."""

        async with self._lock:
            self._cache[key] = value

    async def reset(self) -> None:
        """Remove all cached entries."""

        async with self._lock:
            self._cache.clear()


class SecretCache:
    """The two stores consulted before any upstream call."""

    def __init__(
        self,
        ttl_seconds: float,
        *,
        maxsize: int = DEFAULT_MAX_SIZE,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        logger.debug("Creating secret cache", extra={"ttl_seconds": ttl_seconds})
        self.key_to_id: TTLStore[str] = TTLStore(
            ttl_seconds, maxsize=maxsize, timer=timer, name="key_to_id"
        )
        self.id_to_secret: TTLStore[str] = TTLStore(
            ttl_seconds, maxsize=maxsize, timer=timer, name="id_to_secret"
        )

    async def reset(self) -> None:
        """Flush both stores."""

        await self.key_to_id.reset()
        await self.id_to_secret.reset()


__all__ = ["DEFAULT_MAX_SIZE", "SecretCache", "TTLStore"]
