"""Version lookup routes: by repository coordinate and by artifact id."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from pommapper.api.dependencies import get_facade
from pommapper.api.schemas import APIResponse, VersionPayload
from pommapper.constants import API_ROOT, RELEASES_QPARAM, SNAPSHOTS_QPARAM
from pommapper.models.version import VersionRecord, select_versions
from pommapper.services.facade import PomMapperFacade

router = APIRouter(prefix=API_ROOT, tags=["lookup"])


def _payload(
    records: tuple[VersionRecord, ...],
    snapshots: bool,
    releases: bool,
) -> list[dict[str, object]]:
    selected = select_versions(
        records, snapshots=snapshots, releases=releases
    )
    return [VersionPayload.from_record(r).model_dump() for r in selected]


@router.get("/repo/{repository}/{gav:path}")
async def lookup_by_coordinate(
    repository: str,
    gav: str,
    snapshots: bool = Query(True, alias=SNAPSHOTS_QPARAM),
    releases: bool = Query(True, alias=RELEASES_QPARAM),
    facade: PomMapperFacade = Depends(get_facade),
) -> APIResponse:
    """Versions of the configured artifact stored at ``repository/gav``."""
    descriptor = await facade.find_descriptor(repository, gav)
    if descriptor is None:
        return APIResponse(
            success=False,
            error=f"No configured artifact at '{repository}/{gav}'",
        )
    records = await facade.versions_for(descriptor)
    return APIResponse(
        success=True,
        data=_payload(records, snapshots, releases),
        metadata={"id": descriptor.id, "total": len(records)},
    )


@router.get("/id/{artifact_id}")
async def lookup_by_id(
    artifact_id: str,
    snapshots: bool = Query(True, alias=SNAPSHOTS_QPARAM),
    releases: bool = Query(True, alias=RELEASES_QPARAM),
    facade: PomMapperFacade = Depends(get_facade),
) -> APIResponse:
    """Cached versions of the artifact configured under ``artifact_id``."""
    descriptor = facade.descriptor_by_id(artifact_id)
    if descriptor is None:
        return APIResponse(
            success=False,
            error=f"Artifact '{artifact_id}' not found",
        )
    records = facade.lookup_by_id(artifact_id)
    return APIResponse(
        success=True,
        data=_payload(records, snapshots, releases),
        metadata={
            "repository": descriptor.repository,
            "gav": descriptor.gav(),
            "total": len(records),
        },
    )
