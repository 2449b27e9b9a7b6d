"""Version record builder: turn discovered POMs into VersionRecords."""

from __future__ import annotations

import asyncio
import logging
from pathlib import PurePosixPath

from lxml import etree

from pommapper.constants import PRIMARY_EXTENSION
from pommapper.errors import (
    DocumentFetchError,
    PomMapperError,
    StorageError,
    classify_error,
    is_skippable,
)
from pommapper.extraction.xpath import (
    create_parser,
    extract_all,
    parse_document,
)
from pommapper.models.artifact import ArtifactDescriptor
from pommapper.models.version import (
    VersionRecord,
    group_version_of,
    resolved_version_from_filename,
    sibling_location,
)
from pommapper.services.discovery import VersionDiscovery
from pommapper.storage.protocols import StorageProvider

logger = logging.getLogger(__name__)


class VersionRecordBuilder:
    """Builds one VersionRecord per discovered POM.

    A broken document only costs that document; a parser that cannot
    be created (``ExtractionSetupError``) aborts the whole build.
    """

    def __init__(
        self,
        storage: StorageProvider,
        discovery: VersionDiscovery | None = None,
        *,
        primary_extension: str = PRIMARY_EXTENSION,
    ) -> None:
        self._storage = storage
        self._discovery = discovery or VersionDiscovery(storage)
        self._primary_extension = primary_extension

    async def build(
        self, descriptor: ArtifactDescriptor
    ) -> list[VersionRecord]:
        """Build all records for ``descriptor``.

        Returns ``[]`` when the repository is unknown or nothing is
        stored at the artifact's gav.
        """
        repository = descriptor.repository
        gav = descriptor.gav()
        if not await self._storage.repository_exists(repository):
            return []
        if not gav or not await self._storage.exists(repository, gav):
            return []

        parser = create_parser()
        records: list[VersionRecord] = []
        for document_path in await self._discovery.discover(descriptor):
            try:
                record = await self._read_record(
                    descriptor, document_path, parser
                )
            except PomMapperError as exc:
                if not is_skippable(exc):
                    raise
                logger.warning(
                    "Error while generating pom mappings. "
                    "artifact=%s path=%s scope=%s error=%s",
                    descriptor.id,
                    document_path,
                    classify_error(exc).value,
                    exc,
                )
                continue
            records.append(record)
        return records

    async def _read_record(
        self,
        descriptor: ArtifactDescriptor,
        document_path: str,
        parser: etree.XMLParser,
    ) -> VersionRecord:
        content = await self._fetch(descriptor.repository, document_path)
        document = await asyncio.to_thread(parse_document, content, parser)

        # A later rule with the same id replaces the earlier outcome
        outcomes = {
            o.rule_id: o
            for o in extract_all(document, descriptor.rules, descriptor.id)
        }
        return VersionRecord(
            descriptor=descriptor,
            group_version=group_version_of(document_path),
            resolved_version=resolved_version_from_filename(
                PurePosixPath(document_path).name
            ),
            primary_location=sibling_location(
                document_path, self._primary_extension
            ),
            extracted={
                rule_id: o.value
                for rule_id, o in outcomes.items()
                if o.ok and o.value is not None
            },
            rule_errors={
                rule_id: o.error
                for rule_id, o in outcomes.items()
                if o.error is not None
            },
        )

    async def _fetch(self, repository: str, path: str) -> bytes:
        try:
            return await self._storage.fetch_content(repository, path)
        except StorageError as exc:
            msg = f"Cannot fetch {repository}/{path}: {exc}"
            raise DocumentFetchError(msg) from exc
