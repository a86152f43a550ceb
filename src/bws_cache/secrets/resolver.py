"""Read-through secret lookups backed by the TTL caches and the upstream gateway."""

from __future__ import annotations

import logging

from .cache import SecretCache
from .exceptions import SecretNotFoundError, SecretsConfigError
from .gateway import SessionGateway
from .schemas import SecretIdentifier, SecretRecord


class SecretResolver:
    """Resolves secrets by id or by key, populating the caches on misses."""

    def __init__(self, cache: SecretCache, gateway: SessionGateway) -> None:
        self.cache: SecretCache = cache
        self.gateway: SessionGateway = gateway
        self._logger: logging.Logger = logging.getLogger(__name__)

    async def get_by_id(self, secret_id: str, credential: str) -> str:
        """Return the serialized secret for ``secret_id``."""

        cached = await self.cache.id_to_secret.get(secret_id)
        if cached is not None:
            self._logger.debug("Secret found in cache", extra={"secret_id": secret_id})
            return cached

        self._logger.debug("Secret not found in cache, populating", extra={"secret_id": secret_id})
        records = await self.gateway.with_session(
            credential, lambda session: session.get_secrets_by_ids([secret_id])
        )
        if not records:
            raise SecretNotFoundError(secret_id)

        return await self._store(secret_id, records[0])

    async def get_by_key(self, key: str, organization_id: str, credential: str) -> str:
        """Return the serialized secret whose key is ``key``.

        A miss on the key lists every secret in the organization once and
        caches the whole key → id mapping. Only the requested secret's value
        is fetched, keeping per-secret upstream calls to what was asked for.
        """

        if not organization_id:
            raise SecretsConfigError("Org ID must be specified")

        secret_id = await self.cache.key_to_id.get(key)
        if secret_id is None:
            self._logger.debug("Key not found in cache, listing", extra={"secret_key": key})
            listing = await self.gateway.with_session(
                credential, lambda session: session.list_secrets(organization_id)
            )
            secret_id = await self._store_listing(listing, key)
            if secret_id is None:
                raise SecretNotFoundError(key)

        cached = await self.cache.id_to_secret.get(secret_id)
        if cached is not None:
            self._logger.debug("Secret found in cache", extra={"secret_key": key})
            return cached

        self._logger.debug(
            "Secret not found in cache, populating",
            extra={"secret_key": key, "secret_id": secret_id},
        )
        record = await self.gateway.with_session(
            credential, lambda session: session.get_secret(secret_id)
        )
        return await self._store(secret_id, record)

    async def reset_cache(self) -> None:
        """Drop every cached mapping and secret."""

        self._logger.info("Resetting cache")
        await self.cache.reset()

    async def _store_listing(self, listing: list[SecretIdentifier], key: str) -> str | None:
        capacity = self.cache.key_to_id.maxsize
        if len(listing) > capacity:
            self._logger.warning(
                "Secret listing larger than the key cache, older keys will be evicted",
                extra={"secret_count": len(listing), "cache_max_size": capacity},
            )
        found: str | None = None
        for identifier in listing:
            await self.cache.key_to_id.set(identifier.key, identifier.id)
            if identifier.key == key:
                found = identifier.id
        self._logger.debug("Cached key listing", extra={"secret_count": len(listing)})
        return found

    async def _store(self, secret_id: str, record: SecretRecord) -> str:
        serialized = record.serialize()
        await self.cache.id_to_secret.set(secret_id, serialized)
        return serialized


__all__ = ["SecretResolver"]
