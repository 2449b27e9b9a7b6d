"""Version discovery: find every POM of an artifact in storage."""

from __future__ import annotations

import logging

from pommapper.constants import METADATA_EXTENSION, FileKind
from pommapper.errors import StorageError
from pommapper.models.artifact import ArtifactDescriptor
from pommapper.storage.protocols import StorageProvider

logger = logging.getLogger(__name__)


class VersionDiscovery:
    """Lists version directories under an artifact's gav and their POMs.

    ``discover`` never raises: every resolution problem is logged and
    yields an empty (or shorter) result.
    """

    def __init__(
        self,
        storage: StorageProvider,
        *,
        metadata_extension: str = METADATA_EXTENSION,
    ) -> None:
        self._storage = storage
        self._suffix = f".{metadata_extension}"

    async def discover(self, descriptor: ArtifactDescriptor) -> list[str]:
        repository = descriptor.repository
        if not await self._storage.repository_exists(repository):
            logger.warning('Repository "%s" not found.', repository)
            return []

        gav = descriptor.gav()
        if not gav:
            logger.warning(
                'Artifact "%s" has no locatable gav.', descriptor.id
            )
            return []

        try:
            entries = await self._storage.list_entries(repository, gav)
        except StorageError as exc:
            logger.warning("Error while listing files: %s", exc)
            return []

        version_dirs = [
            entry
            for entry in entries
            if await self._is_directory(repository, entry)
        ]

        documents: list[str] = []
        for version_dir in version_dirs:
            try:
                children = await self._storage.list_entries(
                    repository, version_dir
                )
            except StorageError as exc:
                logger.debug(
                    "event=version_dir_unlistable path=%s error=%s",
                    version_dir,
                    exc,
                )
                continue
            documents.extend(c for c in children if c.endswith(self._suffix))

        logger.debug(
            "maven poms found: %d (artifact=%s)",
            len(documents),
            descriptor.id,
        )
        return documents

    async def _is_directory(self, repository: str, path: str) -> bool:
        try:
            kind = await self._storage.file_kind(repository, path)
        except StorageError:
            return False
        return kind == FileKind.DIRECTORY
