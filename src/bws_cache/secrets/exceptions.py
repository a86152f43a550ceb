"""Custom exceptions raised by the secret cache and its upstream gateway."""

from __future__ import annotations


class SecretsCacheError(Exception):
    """Base error raised for any secret lookup issue."""


class SecretsConfigError(SecretsCacheError):
    """Raised when the service is misconfigured."""


class MissingTokenError(SecretsCacheError):
    """Raised when a request carries no usable bearer token."""

    def __init__(self, message: str = "No token or invalid token sent") -> None:
        super().__init__(message)


class SecretNotFoundError(SecretsCacheError):
    """Raised when the upstream service has no record for an id or key."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"unable to find secret: {identifier}")


class UpstreamError(SecretsCacheError):
    """Raised when a call to the upstream secrets service fails."""


class UpstreamAuthError(UpstreamError):
    """Raised when the upstream service rejects the bearer credential."""


class UpstreamTransportError(UpstreamError):
    """Raised when the upstream service cannot be reached or errors out."""


class SecretSerializationError(SecretsCacheError):
    """Raised when an upstream payload cannot be decoded or encoded."""


__all__ = [
    "MissingTokenError",
    "SecretNotFoundError",
    "SecretSerializationError",
    "SecretsCacheError",
    "SecretsConfigError",
    "UpstreamAuthError",
    "UpstreamError",
    "UpstreamTransportError",
]
