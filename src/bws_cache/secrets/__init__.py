"""Secret cache, upstream gateway and resolver."""

from .cache import DEFAULT_MAX_SIZE, SecretCache, TTLStore
from .exceptions import (
    MissingTokenError,
    SecretNotFoundError,
    SecretSerializationError,
    SecretsCacheError,
    SecretsConfigError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamTransportError,
)
from .gateway import (
    BitwardenSession,
    SecretsSession,
    SessionFactory,
    SessionGateway,
    bitwarden_session_factory,
)
from .resolver import SecretResolver
from .schemas import SecretIdentifier, SecretRecord

__all__ = [
    "BitwardenSession",
    "DEFAULT_MAX_SIZE",
    "MissingTokenError",
    "SecretCache",
    "SecretIdentifier",
    "SecretNotFoundError",
    "SecretRecord",
    "SecretResolver",
    "SecretSerializationError",
    "SecretsCacheError",
    "SecretsConfigError",
    "SecretsSession",
    "SessionFactory",
    "SessionGateway",
    "TTLStore",
    "UpstreamAuthError",
    "UpstreamError",
    "UpstreamTransportError",
    "bitwarden_session_factory",
]
