"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from pommapper.models.version import VersionRecord


class APIResponse(BaseModel):
    """Standard response envelope for all API endpoints."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class VersionPayload(BaseModel):
    """One matched version as served to clients."""

    version: str
    versions: list[str]
    jar: str
    entries: dict[str, str]
    group: str

    @classmethod
    def from_record(cls, record: VersionRecord) -> "VersionPayload":
        return cls(
            version=record.resolved_version,
            versions=record.extracted_values,
            jar=record.primary_location,
            entries=dict(record.extracted),
            group=record.group_version,
        )


class DeployNotification(BaseModel):
    """Request body for POST /api/pommapper/events/deploy."""

    repository: str = Field(min_length=1, max_length=200)
    path: str = Field(min_length=1, max_length=2000)
