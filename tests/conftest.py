"""Shared test fixtures: in-memory storage, descriptors, facade."""

import os

# Keep tests independent of any local .env / settings file.
os.environ["API_KEY"] = ""
os.environ["MAPPER_SETTINGS_FILE"] = "does-not-exist.yaml"

from pathlib import Path

import pytest

from pommapper.api.dependencies import get_facade
from pommapper.config import Settings
from pommapper.main import app
from pommapper.models.artifact import ArtifactDescriptor, ExtractionRule
from pommapper.models.settings import MapperSettings
from pommapper.services.facade import PomMapperFacade
from pommapper.storage.fakes import InMemoryStorage

GAV = "com/example/mylib"


def make_pom(
    api_level: str | None = "7",
    *,
    namespaced: bool = False,
    version: str = "1.0.0",
) -> str:
    """Minimal POM with an optional ``properties/apiLevel`` entry."""
    xmlns = (
        ' xmlns="http://maven.apache.org/POM/4.0.0"' if namespaced else ""
    )
    props = (
        f"<properties><apiLevel>{api_level}</apiLevel></properties>"
        if api_level is not None
        else ""
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<project{xmlns}>"
        "<modelVersion>4.0.0</modelVersion>"
        "<groupId>com.example</groupId>"
        "<artifactId>mylib</artifactId>"
        f"<version>{version}</version>"
        f"{props}"
        "</project>"
    )


def make_descriptor(
    artifact_id: str = "lib",
    *,
    repository: str = "releases",
    group_id: str | None = "com.example",
    artifact_name: str | None = "mylib",
    rules: tuple[tuple[str, str], ...] = (
        ("apiLevel", "//properties/apiLevel"),
    ),
) -> ArtifactDescriptor:
    return ArtifactDescriptor(
        id=artifact_id,
        repository=repository,
        group_id=group_id,
        artifact_name=artifact_name,
        rules=tuple(ExtractionRule(id=i, query=q) for i, q in rules),
    )


def put_version(
    storage: InMemoryStorage,
    version: str,
    content: str,
    *,
    repository: str = "releases",
    gav: str = GAV,
    name: str = "mylib",
) -> str:
    """Store ``name-version.pom`` (and its jar) under ``gav/version``."""
    pom_path = f"{gav}/{version}/{name}-{version}.pom"
    storage.put(repository, pom_path, content)
    storage.put(repository, f"{gav}/{version}/{name}-{version}.jar", b"PK")
    return pom_path


@pytest.fixture
def storage() -> InMemoryStorage:
    """Storage with one release of ``com.example:mylib``."""
    store = InMemoryStorage()
    put_version(store, "1.0.0", make_pom("7"))
    return store


@pytest.fixture
def descriptor() -> ArtifactDescriptor:
    return make_descriptor()


@pytest.fixture
def facade(
    storage: InMemoryStorage, descriptor: ArtifactDescriptor
) -> PomMapperFacade:
    return PomMapperFacade(
        storage, MapperSettings(artifacts=(descriptor,))
    )


def setup_test_app(
    tmp_path: Path,
    facade: PomMapperFacade,
    *,
    api_key: str = "",
) -> Settings:
    """Common app-state setup for API test fixtures.

    The lifespan does not run under ASGITransport, so state is set
    directly and the facade dependency is overridden.
    """
    settings = Settings(
        repositories_dir=tmp_path,
        mapper_settings_file=tmp_path / "pommapper.yaml",
        api_key=api_key,
    )
    app.state.settings = settings
    app.state.facade = facade
    app.dependency_overrides[get_facade] = lambda: facade
    return settings
