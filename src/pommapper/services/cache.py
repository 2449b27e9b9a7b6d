"""In-memory cache of version records keyed by artifact id.

Each slot holds an immutable tuple that is swapped in by a single
dict assignment, so readers either see the previous complete list or
the new complete list. Readers never lock. Rebuilds of the same id
are serialised through a per-id lock; rebuilds of different ids never
contend. Concurrent config- and deploy-triggered rebuilds of one id
resolve as last writer wins.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from pommapper.errors import PomMapperError, classify_error
from pommapper.models.artifact import ArtifactDescriptor
from pommapper.models.version import VersionRecord
from pommapper.services.builder import VersionRecordBuilder

logger = logging.getLogger(__name__)


class VersionCache:
    """Artifact id → tuple of VersionRecord."""

    def __init__(self, builder: VersionRecordBuilder) -> None:
        self._builder = builder
        self._slots: dict[str, tuple[VersionRecord, ...]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._retained: set[str] | None = None

    def has_entry(self, artifact_id: str) -> bool:
        return artifact_id in self._slots

    def version_count(self, artifact_id: str) -> int:
        return len(self.versions(artifact_id))

    def versions(self, artifact_id: str) -> tuple[VersionRecord, ...]:
        return self._slots.get(artifact_id, ())

    def artifact_ids(self) -> list[str]:
        return list(self._slots)

    async def rebuild(self, descriptor: ArtifactDescriptor) -> bool:
        """Recompute one slot.

        Returns False and leaves the slot untouched when the build finds
        no versions, the build fails, or the id was pruned while the
        build ran.
        """
        lock = self._locks.setdefault(descriptor.id, asyncio.Lock())
        async with lock:
            try:
                records = await self._builder.build(descriptor)
            except PomMapperError as exc:
                logger.warning(
                    "event=cache_rebuild_failed artifact=%s scope=%s "
                    "error=%s",
                    descriptor.id,
                    classify_error(exc).value,
                    exc,
                )
                return False
            if not records:
                return False
            retained = self._retained
            if retained is not None and descriptor.id not in retained:
                logger.info(
                    "event=cache_rebuild_discarded artifact=%s reason=pruned",
                    descriptor.id,
                )
                return False
            self._slots[descriptor.id] = tuple(records)
            return True

    def prune(self, keep_ids: Iterable[str]) -> list[str]:
        """Drop slots whose id is not in ``keep_ids``; return dropped ids.

        Rebuilds of other ids that finish later are discarded.
        """
        keep = set(keep_ids)
        self._retained = keep
        dropped = [aid for aid in self._slots if aid not in keep]
        for aid in dropped:
            del self._slots[aid]
        return dropped
