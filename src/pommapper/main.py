"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pommapper.logging_config import setup_logging

setup_logging()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from pommapper import __version__  # noqa: E402
from pommapper.api.middleware.auth import ApiKeyMiddleware  # noqa: E402
from pommapper.api.routes import admin, health, lookup  # noqa: E402
from pommapper.config import Settings, load_mapper_settings  # noqa: E402
from pommapper.errors import ConfigError  # noqa: E402
from pommapper.models.settings import MapperSettings  # noqa: E402
from pommapper.services.facade import PomMapperFacade  # noqa: E402
from pommapper.storage.filesystem import FileSystemStorage  # noqa: E402

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # 1. Use module-level settings (single source of truth)
    settings = _settings
    setup_logging(settings.log_level, debug=settings.debug_mode)

    # 2. Storage + facade
    storage = FileSystemStorage(settings.repositories_dir)
    facade = PomMapperFacade(storage)

    # 3. Store in app.state (read by the dependencies and the middleware)
    app.state.settings = settings
    app.state.facade = facade

    # 4. Load mapper settings and build the cache. A broken settings
    #    file leaves the service up with no artifacts configured.
    _logger.info("Initializing...")
    try:
        mapper_settings = load_mapper_settings(
            settings.mapper_settings_file
        )
    except ConfigError as exc:
        _logger.warning("event=settings_load_failed error=%s", exc)
        mapper_settings = MapperSettings()
    _logger.info("Attempting to generate cache...")
    await facade.on_config_change(mapper_settings)
    _logger.info("Cache generation complete.")

    # 5. Security: warn if admin routes are unauthenticated
    if not settings.api_key:
        _logger.warning(
            "event=no_api_key action=admin_endpoints_public"
        )

    yield


app = FastAPI(
    title="PomMapper",
    description="Queryable index of Maven artifact versions",
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Middleware stack (Starlette LIFO: last added = outermost = runs first)
#
# Inbound request order:
#   CORSMiddleware (outermost) -> ApiKeyMiddleware -> Router
_settings = Settings()

app.add_middleware(ApiKeyMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origin_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key"],
    allow_credentials=False,
)

# Routes
app.include_router(health.router)
app.include_router(lookup.router)
app.include_router(admin.router)
