"""Exclusive access to the upstream secrets service.

Only one upstream session is ever open. Every logical operation runs as
connect → call → close while holding the gateway lock; the blocking part
runs in a worker thread under a second, thread-level lock so the session
is always closed before another one opens, even when the awaiting task
has been cancelled or timed out. A call whose caller gave up before its
session opened is skipped without contacting upstream.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Sequence
from importlib import import_module
from typing import Any, Protocol, TypeVar
from uuid import uuid4

from .exceptions import UpstreamAuthError, UpstreamError, UpstreamTransportError
from .schemas import SecretIdentifier, SecretRecord, parse_identifiers, parse_record

T = TypeVar("T")

logger = logging.getLogger(__name__)


class SecretsSession(Protocol):
    """An authenticated handle to the upstream secrets service."""

    def list_secrets(self, organization_id: str) -> list[SecretIdentifier]:  # pragma: no cover
        """Return every ``(key, id)`` pair visible in the organization."""

    def get_secret(self, secret_id: str) -> SecretRecord:  # pragma: no cover
        """Return a single secret by id."""

    def get_secrets_by_ids(self, secret_ids: Sequence[str]) -> list[SecretRecord]:  # pragma: no cover
        """Return the secrets matching ``secret_ids``."""

    def close(self) -> None:  # pragma: no cover
        """Release the session."""


SessionFactory = Callable[[str, str], SecretsSession]
"""Opens a session given ``(credential, state_path)``."""


def _sdk() -> Any:
    try:
        return import_module("bitwarden_sdk")
    except ImportError as exc:
        raise UpstreamTransportError(
            "bitwarden-sdk is required to reach the secrets service. "
            "Install it with: pip install 'bws-cache[bitwarden]'"
        ) from exc


def _unwrap(response: Any, operation: str) -> Any:
    if getattr(response, "success", True) is False:
        message = getattr(response, "error_message", None) or "unknown error"
        raise UpstreamTransportError(f"{operation} failed: {message}")
    return getattr(response, "data", None)


def _as_dict(item: Any) -> dict[str, Any]:
    if isinstance(item, dict):
        return item
    return item.to_dict()


class BitwardenSession:
    """:class:`SecretsSession` backed by the Bitwarden Secrets Manager SDK."""

    def __init__(self, client: Any) -> None:
        self._client: Any | None = client

    @classmethod
    def login(
        cls,
        access_token: str,
        state_path: str,
        *,
        api_url: str | None = None,
        identity_url: str | None = None,
    ) -> BitwardenSession:
        """Create an SDK client and authenticate it with ``access_token``."""

        sdk = _sdk()
        try:
            if api_url or identity_url:
                settings = sdk.client_settings_from_dict(
                    {
                        "apiUrl": api_url,
                        "identityUrl": identity_url,
                        "deviceType": sdk.DeviceType.SDK,
                        "userAgent": "bws-cache",
                    }
                )
                client = sdk.BitwardenClient(settings)
            else:
                client = sdk.BitwardenClient()
        except Exception as exc:
            raise UpstreamTransportError("Unable to create secrets service client") from exc

        try:
            response = client.auth().login_access_token(access_token, state_path)
        except Exception as exc:
            raise UpstreamAuthError("Authentication failed with the secrets service") from exc
        if getattr(response, "success", True) is False:
            raise UpstreamAuthError(
                f"Authentication failed with the secrets service: {response.error_message}"
            )
        return cls(client)

    def list_secrets(self, organization_id: str) -> list[SecretIdentifier]:
        data = self._call("list secrets", lambda secrets: secrets.list(organization_id))
        items = getattr(data, "data", None) or []
        return parse_identifiers([_as_dict(item) for item in items])

    def get_secret(self, secret_id: str) -> SecretRecord:
        data = self._call("get secret", lambda secrets: secrets.get(secret_id))
        if data is None:
            raise UpstreamTransportError(f"get secret returned no data for {secret_id}")
        return parse_record(_as_dict(data))

    def get_secrets_by_ids(self, secret_ids: Sequence[str]) -> list[SecretRecord]:
        data = self._call("get secrets by ids", lambda secrets: secrets.get_by_ids(list(secret_ids)))
        items = getattr(data, "data", None) or []
        return [parse_record(_as_dict(item)) for item in items]

    def close(self) -> None:
        self._client = None

    def _call(self, operation: str, request: Callable[[Any], Any]) -> Any:
        if self._client is None:
            raise UpstreamTransportError(f"{operation} attempted on a closed session")
        try:
            response = request(self._client.secrets())
        except UpstreamError:
            raise
        except Exception as exc:
            raise UpstreamTransportError(f"{operation} failed: {exc}") from exc
        return _unwrap(response, operation)


def bitwarden_session_factory(
    *, api_url: str | None = None, identity_url: str | None = None
) -> SessionFactory:
    """Return a :data:`SessionFactory` that logs in through the Bitwarden SDK."""

    def factory(credential: str, state_path: str) -> SecretsSession:
        return BitwardenSession.login(
            credential, state_path, api_url=api_url, identity_url=identity_url
        )

    return factory


class SessionGateway:
    """Serializes every upstream call through a single session."""

    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        *,
        state_dir: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._session_factory = session_factory or bitwarden_session_factory()
        self._state_path = os.path.join(state_dir or tempfile.gettempdir(), str(uuid4()))
        self._timeout = timeout
        self._lock = asyncio.Lock()
        self._session_lock = threading.Lock()

    @property
    def state_path(self) -> str:
        """Session-state file shared by every login of this gateway."""

        return self._state_path

    async def with_session(
        self,
        credential: str,
        fn: Callable[[SecretsSession], T],
        *,
        timeout: float | None = None,
    ) -> T:
        """Open a session for ``credential``, run ``fn`` against it and close it.

        ``fn`` runs in a worker thread and must be synchronous. Failures are
        raised to the caller unchanged; nothing is retried. A ``TimeoutError``
        from the session itself surfaces as :class:`UpstreamTransportError`.
        """

        deadline = timeout if timeout is not None else self._timeout
        abandoned = threading.Event()
        logger.debug("Waiting for upstream session")
        async with self._lock:
            call = asyncio.to_thread(self._run, credential, fn, abandoned)
            try:
                if deadline is None:
                    return await call
                return await asyncio.wait_for(call, deadline)
            except TimeoutError as exc:
                abandoned.set()
                raise UpstreamTransportError(
                    f"Secrets service did not answer within {deadline}s"
                ) from exc
            except asyncio.CancelledError:
                abandoned.set()
                raise

    def close(self) -> None:
        """Remove the session-state file left behind by previous logins."""

        with contextlib.suppress(FileNotFoundError):
            os.remove(self._state_path)
            logger.debug("Removed session state file", extra={"state_path": self._state_path})

    def _run(
        self,
        credential: str,
        fn: Callable[[SecretsSession], T],
        abandoned: threading.Event,
    ) -> T:
        with self._session_lock:
            if abandoned.is_set():
                logger.debug("Caller gone before the session opened, skipping upstream call")
                raise UpstreamTransportError("Upstream call abandoned by its caller")
            logger.debug("Opening upstream session")
            try:
                session = self._session_factory(credential, self._state_path)
            except TimeoutError as exc:
                raise UpstreamTransportError(f"Secrets service timed out: {exc}") from exc
            try:
                return fn(session)
            except TimeoutError as exc:
                raise UpstreamTransportError(f"Secrets service timed out: {exc}") from exc
            finally:
                logger.debug("Closing upstream session")
                session.close()


__all__ = [
    "BitwardenSession",
    "SecretsSession",
    "SessionFactory",
    "SessionGateway",
    "bitwarden_session_factory",
]
