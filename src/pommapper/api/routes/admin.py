"""Administrative routes: cache rebuild, settings reload, deploy events."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from pommapper.api.dependencies import get_facade, get_settings
from pommapper.api.schemas import APIResponse, DeployNotification
from pommapper.config import Settings, load_mapper_settings
from pommapper.constants import API_ROOT
from pommapper.errors import ConfigError
from pommapper.services.facade import PomMapperFacade

logger = logging.getLogger(__name__)

router = APIRouter(prefix=API_ROOT, tags=["admin"])


@router.post("/cache/update")
async def update_cache(
    facade: PomMapperFacade = Depends(get_facade),
) -> APIResponse:
    """Rebuild the cache for every configured artifact now."""
    summary = await facade.update_cache()
    return APIResponse(success=True, data=summary.to_dict())


@router.get("/cache")
async def cache_status(
    facade: PomMapperFacade = Depends(get_facade),
) -> APIResponse:
    """Cached artifact ids with their version counts."""
    cache = facade.cache
    return APIResponse(
        success=True,
        data={
            aid: cache.version_count(aid) for aid in cache.artifact_ids()
        },
    )


@router.post("/settings/reload")
async def reload_settings(
    facade: PomMapperFacade = Depends(get_facade),
    settings: Settings = Depends(get_settings),
) -> APIResponse:
    """Re-read the mapper settings file and rebuild the cache."""
    try:
        mapper_settings = load_mapper_settings(settings.mapper_settings_file)
    except ConfigError as exc:
        logger.warning("event=settings_reload_failed error=%s", exc)
        return APIResponse(success=False, error=str(exc))
    summary = await facade.on_config_change(mapper_settings)
    return APIResponse(
        success=True,
        data=summary.to_dict(),
        metadata={"artifacts": mapper_settings.artifact_ids},
    )


@router.post("/events/deploy")
async def deploy_event(
    body: DeployNotification,
    facade: PomMapperFacade = Depends(get_facade),
) -> APIResponse:
    """Notify the mapper that a file was deployed."""
    rebuilt = await facade.on_deploy(body.repository, body.path)
    return APIResponse(success=True, data={"rebuilt": rebuilt})


@router.get("/validation")
async def validation_report(
    facade: PomMapperFacade = Depends(get_facade),
) -> APIResponse:
    """Validation results for the current settings, unfiltered."""
    results = await facade.validate()
    return APIResponse(
        success=True,
        data=[r.to_dict() for r in results],
        metadata={"level": str(facade.settings.validation_log_level)},
    )
