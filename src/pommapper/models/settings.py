"""Mapper settings snapshot: the YAML-backed domain configuration."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pommapper.constants import ValidationLogLevel
from pommapper.models.artifact import ArtifactDescriptor

logger = logging.getLogger(__name__)


class MapperSettings(BaseModel):
    """Immutable snapshot handed to the facade on every change."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Print warnings if Apache Maven naming conventions are violated
    naming_convention_warning: bool = Field(
        default=True, alias="namingConventionWarning"
    )
    # Print warnings if configured repositories/artifacts cannot be found
    run_existence_checks: bool = Field(
        default=True, alias="runExistenceChecks"
    )
    validation_log_level: ValidationLogLevel = Field(
        default=ValidationLogLevel.ALL, alias="validationLogLevel"
    )
    artifacts: tuple[ArtifactDescriptor, ...] = ()

    @field_validator("artifacts")
    @classmethod
    def _warn_duplicate_ids(
        cls, v: tuple[ArtifactDescriptor, ...]
    ) -> tuple[ArtifactDescriptor, ...]:
        seen: set[str] = set()
        dupes: list[str] = []
        for artifact in v:
            if artifact.id in seen:
                dupes.append(artifact.id)
            seen.add(artifact.id)
        if dupes:
            logger.warning(
                "Duplicate artifact ids in settings: %s", ", ".join(dupes)
            )
        return v

    @property
    def artifact_ids(self) -> list[str]:
        return [a.id for a in self.artifacts]
