"""Pydantic schemas mirroring responses from the upstream secrets service."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import SecretSerializationError


class UpstreamModel(BaseModel):
    """Base model accepting both camelCase and snake_case field names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SecretIdentifier(UpstreamModel):
    """A ``(key, id)`` pair returned when listing an organization's secrets."""

    id: str
    key: str
    organization_id: str | None = Field(default=None, alias="organizationId")


class SecretRecord(UpstreamModel):
    """A single secret including its value and metadata."""

    id: str
    organization_id: str | None = Field(default=None, alias="organizationId")
    project_id: str | None = Field(default=None, alias="projectId")
    key: str
    value: str
    note: str = ""
    creation_date: datetime | None = Field(default=None, alias="creationDate")
    revision_date: datetime | None = Field(default=None, alias="revisionDate")

    def serialize(self) -> str:
        """Return the JSON document cached and served for this secret."""

        try:
            return self.model_dump_json(by_alias=True)
        except ValueError as exc:  # pragma: no cover - pydantic serialization guard
            raise SecretSerializationError(f"Failed to encode secret {self.id}") from exc


def parse_identifiers(items: list[dict[str, Any]]) -> list[SecretIdentifier]:
    """Validate a raw listing payload."""

    try:
        return [SecretIdentifier.model_validate(item) for item in items]
    except ValidationError as exc:
        raise SecretSerializationError("Malformed secret listing returned by upstream") from exc


def parse_record(payload: dict[str, Any]) -> SecretRecord:
    """Validate a raw secret payload."""

    try:
        return SecretRecord.model_validate(payload)
    except ValidationError as exc:
        raise SecretSerializationError("Malformed secret returned by upstream") from exc


__all__ = [
    "SecretIdentifier",
    "SecretRecord",
    "UpstreamModel",
    "parse_identifiers",
    "parse_record",
]
