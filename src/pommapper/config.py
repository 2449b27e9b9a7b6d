"""Environment-based configuration and the YAML mapper settings loader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

from pommapper.errors import ConfigError
from pommapper.models.settings import MapperSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Storage: one directory per repository
    repositories_dir: Path = Path("data/repositories")

    # Mapper settings (artifacts, validation flags)
    mapper_settings_file: Path = Path("pommapper.yaml")

    # Logging
    log_level: str = "INFO"
    debug_mode: bool = False

    # API
    api_key: str = ""
    cors_origins: str = ""

    # Running service targeted by `pommapper update-cache`
    server_url: str = "http://127.0.0.1:8000"
    server_timeout: float = 300.0

    @field_validator("log_level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }


def load_mapper_settings(path: Path) -> MapperSettings:
    """Load the artifact mapping settings from ``path``.

    A missing file yields the defaults (no artifacts). Raises
    ``ConfigError`` if the file is not valid YAML or does not match
    the settings schema.
    """
    if not path.exists():
        logger.warning(
            "event=mapper_settings_missing path=%s action=use_defaults",
            path,
        )
        return MapperSettings()

    try:
        raw: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc

    if raw is None:
        return MapperSettings()
    if not isinstance(raw, dict):
        msg = f"Mapper settings in {path} must be a mapping"
        raise ConfigError(msg)

    try:
        return MapperSettings.model_validate(raw)
    except ValidationError as exc:
        msg = f"Invalid mapper settings in {path}: {exc}"
        raise ConfigError(msg) from exc
