"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from pommapper import __version__
from pommapper.api.dependencies import get_facade, get_settings
from pommapper.config import Settings
from pommapper.services.facade import PomMapperFacade

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Basic health check for load balancers."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/detailed")
async def health_detailed(
    facade: PomMapperFacade = Depends(get_facade),
    settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    """Detailed health check with component-level status."""
    storage_ok = settings.repositories_dir.is_dir()
    configured = len(facade.descriptors)
    cached = len(facade.cache.artifact_ids())

    components = {
        "storage": {
            "status": "available" if storage_ok else "unavailable",
            "root": str(settings.repositories_dir),
        },
        "cache": {
            "status": "ready" if cached == configured else "partial",
            "configured": configured,
            "cached": cached,
        },
    }

    return {
        "status": "healthy" if storage_ok else "degraded",
        "version": __version__,
        "components": components,
        "timestamp": datetime.now(UTC).isoformat(),
    }
