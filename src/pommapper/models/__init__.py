"""Domain models: descriptors, settings snapshots and version records."""

from pommapper.models.artifact import (
    ArtifactDescriptor,
    ExtractionRule,
    coordinate_to_path,
)
from pommapper.models.settings import MapperSettings
from pommapper.models.version import RuleOutcome, VersionRecord

__all__ = [
    "ArtifactDescriptor",
    "ExtractionRule",
    "MapperSettings",
    "RuleOutcome",
    "VersionRecord",
    "coordinate_to_path",
]
