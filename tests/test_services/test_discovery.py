"""Tests for VersionDiscovery."""

from __future__ import annotations

import logging

import pytest

from pommapper.services.discovery import VersionDiscovery
from pommapper.storage.fakes import InMemoryStorage
from tests.conftest import GAV, make_descriptor, make_pom, put_version


@pytest.mark.asyncio
async def test_finds_pom_in_each_version_directory() -> None:
    storage = InMemoryStorage()
    put_version(storage, "1.0.0", make_pom())
    put_version(storage, "1.1.0-SNAPSHOT", make_pom())
    storage.put("releases", f"{GAV}/maven-metadata.xml", "<metadata/>")

    found = await VersionDiscovery(storage).discover(make_descriptor())

    assert found == [
        f"{GAV}/1.0.0/mylib-1.0.0.pom",
        f"{GAV}/1.1.0-SNAPSHOT/mylib-1.1.0-SNAPSHOT.pom",
    ]


@pytest.mark.asyncio
async def test_unknown_repository_logs_and_returns_empty(
    caplog: pytest.LogCaptureFixture,
) -> None:
    storage = InMemoryStorage()
    with caplog.at_level(logging.WARNING, logger="pommapper.services"):
        found = await VersionDiscovery(storage).discover(make_descriptor())
    assert found == []
    assert 'Repository "releases" not found.' in caplog.text


@pytest.mark.asyncio
async def test_missing_artifact_directory_logs_and_returns_empty(
    caplog: pytest.LogCaptureFixture,
) -> None:
    storage = InMemoryStorage()
    storage.add_repository("releases")
    with caplog.at_level(logging.WARNING, logger="pommapper.services"):
        found = await VersionDiscovery(storage).discover(make_descriptor())
    assert found == []
    assert "Error while listing files" in caplog.text


@pytest.mark.asyncio
async def test_blank_gav_returns_empty() -> None:
    storage = InMemoryStorage()
    storage.add_repository("releases")
    found = await VersionDiscovery(storage).discover(
        make_descriptor(group_id="")
    )
    assert found == []


@pytest.mark.asyncio
async def test_version_directory_without_pom_contributes_nothing() -> None:
    storage = InMemoryStorage()
    put_version(storage, "1.0.0", make_pom())
    storage.put("releases", f"{GAV}/2.0.0/mylib-2.0.0.jar", b"PK")

    found = await VersionDiscovery(storage).discover(make_descriptor())

    assert found == [f"{GAV}/1.0.0/mylib-1.0.0.pom"]


@pytest.mark.asyncio
async def test_uninspectable_entries_are_dropped() -> None:
    storage = InMemoryStorage()
    put_version(storage, "1.0.0", make_pom())
    put_version(storage, "2.0.0", make_pom())
    storage.break_path("releases", f"{GAV}/2.0.0")

    found = await VersionDiscovery(storage).discover(make_descriptor())

    assert found == [f"{GAV}/1.0.0/mylib-1.0.0.pom"]


@pytest.mark.asyncio
async def test_zero_version_directories_is_not_an_error() -> None:
    storage = InMemoryStorage()
    storage.put("releases", f"{GAV}/maven-metadata.xml", "<metadata/>")
    assert await VersionDiscovery(storage).discover(make_descriptor()) == []
