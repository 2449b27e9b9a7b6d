"""Artifact descriptors and their storage coordinates."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class ExtractionRule(BaseModel):
    """A named XPath expression evaluated against each version's POM."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    query: str = Field(alias="xpath", min_length=1)


class ArtifactDescriptor(BaseModel):
    """An artifact considered for listing requests.

    ``id`` is the only external key. ``repository``, ``group_id`` and
    ``artifact_name`` locate the artifact in storage via :meth:`gav`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    repository: str = ""
    group_id: str | None = Field(default=None, alias="groupId")
    artifact_name: str | None = Field(default=None, alias="artifactId")
    rules: tuple[ExtractionRule, ...] = Field(
        default=(), alias="versionXPath"
    )

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("artifact id must not be blank")
        return v

    @field_validator("rules")
    @classmethod
    def _warn_duplicate_rules(
        cls, v: tuple[ExtractionRule, ...]
    ) -> tuple[ExtractionRule, ...]:
        seen: set[str] = set()
        dupes: list[str] = []
        for rule in v:
            if rule.id in seen:
                dupes.append(rule.id)
            seen.add(rule.id)
        if dupes:
            logger.warning(
                "Duplicate extraction rule ids: %s", ", ".join(dupes)
            )
        return v

    def gav(self) -> str:
        """Root storage path of the artifact, or ``""`` if not locatable."""
        if not self.group_id or not self.artifact_name:
            return ""
        if self.group_id.isspace() or self.artifact_name.isspace():
            return ""
        return str(
            PurePosixPath(*self.group_id.split("."), self.artifact_name)
        )

    def versioned_location(self, version: str, extension: str) -> str:
        """Path to ``{artifact}-{version}.{extension}`` without existence check."""
        root = self.gav()
        if not root:
            return ""
        filename = f"{self.artifact_name}-{version}.{extension}"
        return str(PurePosixPath(root, version, filename))


def coordinate_to_path(coordinate: str) -> str:
    """Normalise ``com.example:lib`` or ``com/example/lib/`` to a storage path.

    >>> coordinate_to_path("com.example:lib")
    'com/example/lib'
    """
    coordinate = coordinate.strip().strip("/")
    if ":" in coordinate:
        group, _, name = coordinate.partition(":")
        name = name.split(":", 1)[0]
        if not group or not name:
            return ""
        return str(PurePosixPath(*group.split("."), name))
    if not coordinate:
        return ""
    return str(PurePosixPath(coordinate))
