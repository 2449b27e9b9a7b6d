"""FastAPI dependency injection for the facade and settings."""

from __future__ import annotations

from fastapi import Request

from pommapper.config import Settings
from pommapper.services.facade import PomMapperFacade


def get_facade(request: Request) -> PomMapperFacade:
    """Get PomMapperFacade from app.state."""
    return request.app.state.facade  # type: ignore[no-any-return]


def get_settings(request: Request) -> Settings:
    """Get environment Settings from app.state."""
    return request.app.state.settings  # type: ignore[no-any-return]
