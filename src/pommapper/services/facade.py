"""Query facade: the single entry point used by the API and the CLI.

The facade is handed immutable settings snapshots via
:meth:`PomMapperFacade.on_config_change`; it never holds a live,
mutated reference. Host events (configuration reload, deploys) are
plain method calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from pommapper.models.artifact import ArtifactDescriptor, coordinate_to_path
from pommapper.models.settings import MapperSettings
from pommapper.models.version import VersionRecord
from pommapper.services.builder import VersionRecordBuilder
from pommapper.services.cache import VersionCache
from pommapper.services.discovery import VersionDiscovery
from pommapper.services.validation import (
    ValidationResult,
    print_block,
    validate_settings,
)
from pommapper.storage.protocols import StorageProvider

logger = logging.getLogger(__name__)


@dataclass
class RebuildSummary:
    """Outcome of a full cache rebuild."""

    rebuilt: dict[str, int] = field(default_factory=dict)
    failed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, object]:
        return {"rebuilt": dict(self.rebuilt), "failed": list(self.failed)}


class PomMapperFacade:
    """Lookups over the version cache plus rebuild triggers."""

    def __init__(
        self,
        storage: StorageProvider,
        settings: MapperSettings | None = None,
        *,
        cache: VersionCache | None = None,
    ) -> None:
        self._storage = storage
        self._settings = settings or MapperSettings()
        self._cache = cache or VersionCache(
            VersionRecordBuilder(storage, VersionDiscovery(storage))
        )

    # ── State ────────────────────────────────────────────

    @property
    def settings(self) -> MapperSettings:
        return self._settings

    @property
    def cache(self) -> VersionCache:
        return self._cache

    @property
    def descriptors(self) -> tuple[ArtifactDescriptor, ...]:
        return self._settings.artifacts

    def descriptor_by_id(self, artifact_id: str) -> ArtifactDescriptor | None:
        for descriptor in self._settings.artifacts:
            if descriptor.id == artifact_id:
                return descriptor
        return None

    # ── Storage checks ───────────────────────────────────

    async def is_repository_known(self, repository: str) -> bool:
        if not repository:
            return False
        return await self._storage.repository_exists(repository)

    async def has_artifact(self, repository: str, path: str) -> bool:
        if not repository or not path:
            return False
        if not await self._storage.repository_exists(repository):
            return False
        return await self._storage.exists(repository, path)

    async def find_descriptor(
        self, repository: str, path: str
    ) -> ArtifactDescriptor | None:
        """Configured descriptor whose gav equals ``path``, if it exists."""
        path = coordinate_to_path(path)
        if not await self.has_artifact(repository, path):
            return None
        for descriptor in self._settings.artifacts:
            if descriptor.repository == repository and descriptor.gav() == path:
                return descriptor
        return None

    def find_deployed_descriptor(
        self, repository: str, path: str
    ) -> ArtifactDescriptor | None:
        """Configured descriptor whose gav is ``path`` or one of its parents."""
        deployed = PurePosixPath(coordinate_to_path(path))
        for descriptor in self._settings.artifacts:
            gav = descriptor.gav()
            if descriptor.repository != repository or not gav:
                continue
            if deployed == PurePosixPath(gav) or deployed.is_relative_to(gav):
                return descriptor
        return None

    # ── Lookups ──────────────────────────────────────────

    def lookup_by_id(self, artifact_id: str) -> tuple[VersionRecord, ...]:
        return self._cache.versions(artifact_id)

    async def lookup_direct(
        self, repository: str, coordinate: str
    ) -> tuple[VersionRecord, ...]:
        """Versions for a coordinate; builds synchronously on a cache miss."""
        descriptor = await self.find_descriptor(repository, coordinate)
        if descriptor is None:
            return ()
        return await self.versions_for(descriptor)

    async def versions_for(
        self, descriptor: ArtifactDescriptor
    ) -> tuple[VersionRecord, ...]:
        """Versions of a resolved descriptor; builds on a cache miss."""
        if not self._cache.has_entry(descriptor.id):
            if not await self._cache.rebuild(descriptor):
                logger.warning(
                    '  > "%s" cache generation failed', descriptor.id
                )
        return self._cache.versions(descriptor.id)

    # ── Triggers ─────────────────────────────────────────

    async def validate(self) -> list[ValidationResult]:
        return await validate_settings(self._settings, self)

    async def update_cache(self) -> RebuildSummary:
        """Rebuild every configured artifact independently."""
        artifacts = self._settings.artifacts
        logger.debug("Generating cache for %d artifacts...", len(artifacts))
        summary = RebuildSummary()
        for artifact in artifacts:
            if await self._cache.rebuild(artifact):
                count = self._cache.version_count(artifact.id)
                summary.rebuilt[artifact.id] = count
                logger.debug(
                    '  > "%s" cache generated. (%d versions)',
                    artifact.id,
                    count,
                )
            else:
                summary.failed.append(artifact.id)
                logger.warning(
                    '  > "%s" cache generation failed', artifact.id
                )
        return summary

    async def on_config_change(
        self, new_settings: MapperSettings
    ) -> RebuildSummary:
        """Swap in a settings snapshot, validate it and rebuild the cache."""
        self._settings = new_settings
        logger.info("Loaded %d artifacts.", len(new_settings.artifacts))
        logger.debug("  > %s", ", ".join(new_settings.artifact_ids))

        results = await self.validate()
        print_block(
            results,
            logger.warning,
            logger.info,
            new_settings.validation_log_level,
        )

        dropped = self._cache.prune(new_settings.artifact_ids)
        if dropped:
            logger.info(
                "event=cache_pruned artifacts=%s", ", ".join(dropped)
            )
        return await self.update_cache()

    async def on_deploy(self, repository: str, path: str) -> bool:
        """Targeted rebuild after a deploy; True if a rebuild ran."""
        descriptor = self.find_deployed_descriptor(repository, path)
        if descriptor is None:
            return False
        if not self._cache.has_entry(descriptor.id):
            return False
        logger.debug(
            "Updating cache for artifact with id: %s", descriptor.id
        )
        if not await self._cache.rebuild(descriptor):
            logger.warning(
                '  > "%s" cache generation failed', descriptor.id
            )
        return True
