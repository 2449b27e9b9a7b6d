"""Per-version records produced by the record builder."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from pommapper.constants import SNAPSHOT_SUFFIX
from pommapper.models.artifact import ArtifactDescriptor


@dataclass(frozen=True)
class RuleOutcome:
    """Result of evaluating one extraction rule."""

    rule_id: str
    value: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class VersionRecord:
    """One discovered version of an artifact.

    ``group_version`` is the directory the POM was found in, which may
    be a snapshot directory. ``resolved_version`` comes from the POM
    filename, so timestamped snapshot builds resolve to their full
    version string.
    """

    descriptor: ArtifactDescriptor
    group_version: str
    resolved_version: str
    primary_location: str
    extracted: Mapping[str, str] = field(default_factory=dict)
    rule_errors: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_snapshot(self) -> bool:
        return self.group_version.endswith(SNAPSHOT_SUFFIX)

    @property
    def extracted_values(self) -> list[str]:
        """Extracted values in rule order."""
        rule_ids = dict.fromkeys(rule.id for rule in self.descriptor.rules)
        return [
            self.extracted[rule_id]
            for rule_id in rule_ids
            if rule_id in self.extracted
        ]


def resolved_version_from_filename(filename: str) -> str:
    """Version between the first ``-`` and the last ``.`` of a filename.

    A name without ``-`` starts at index 0; a name without ``.`` runs
    to the end.
    """
    start = filename.find("-") + 1
    end = filename.rfind(".")
    if end < start:
        end = len(filename)
    return filename[start:end]


def group_version_of(document_path: str) -> str:
    """Simple name of the directory holding the document."""
    return PurePosixPath(document_path).parent.name


def sibling_location(document_path: str, extension: str) -> str:
    """Replace the document's extension with ``extension``."""
    return str(PurePosixPath(document_path).with_suffix(f".{extension}"))


def select_versions(
    records: Iterable[VersionRecord],
    *,
    snapshots: bool = True,
    releases: bool = True,
) -> list[VersionRecord]:
    """Keep snapshot and/or release records."""
    return [
        r
        for r in records
        if (snapshots and r.is_snapshot) or (releases and not r.is_snapshot)
    ]
