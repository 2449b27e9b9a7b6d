"""Tests for VersionCache slot semantics."""

from __future__ import annotations

import asyncio
import logging

import pytest

from pommapper.errors import ExtractionSetupError
from pommapper.models.artifact import ArtifactDescriptor
from pommapper.models.version import VersionRecord
from pommapper.services.builder import VersionRecordBuilder
from pommapper.services.cache import VersionCache
from pommapper.storage.fakes import InMemoryStorage
from tests.conftest import make_descriptor, make_pom, put_version


class ScriptedBuilder:
    """Builder double returning canned records, optionally gated."""

    def __init__(self) -> None:
        self.results: dict[str, list[VersionRecord]] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.fail_setup: set[str] = set()
        self.calls: list[str] = []

    async def build(
        self, descriptor: ArtifactDescriptor
    ) -> list[VersionRecord]:
        self.calls.append(descriptor.id)
        gate = self.gates.get(descriptor.id)
        if gate is not None:
            await gate.wait()
        if descriptor.id in self.fail_setup:
            raise ExtractionSetupError("parser unavailable")
        return list(self.results.get(descriptor.id, []))


def _records(descriptor: ArtifactDescriptor, *versions: str) -> list[VersionRecord]:
    return [
        VersionRecord(
            descriptor=descriptor,
            group_version=v,
            resolved_version=v,
            primary_location=descriptor.versioned_location(v, "jar"),
        )
        for v in versions
    ]


def _cache(builder: ScriptedBuilder) -> VersionCache:
    return VersionCache(builder)  # type: ignore[arg-type]


class TestQueries:
    def test_absent_slot(self) -> None:
        cache = _cache(ScriptedBuilder())
        assert cache.has_entry("lib") is False
        assert cache.version_count("lib") == 0
        assert cache.versions("lib") == ()

    @pytest.mark.asyncio
    async def test_rebuild_populates_slot(self) -> None:
        builder = ScriptedBuilder()
        lib = make_descriptor("lib")
        builder.results["lib"] = _records(lib, "1.0.0", "1.1.0")
        cache = _cache(builder)

        assert await cache.rebuild(lib) is True
        assert cache.has_entry("lib")
        assert cache.version_count("lib") == 2
        assert [r.resolved_version for r in cache.versions("lib")] == [
            "1.0.0",
            "1.1.0",
        ]


class TestRebuildFailure:
    @pytest.mark.asyncio
    async def test_empty_result_leaves_slot_untouched(self) -> None:
        builder = ScriptedBuilder()
        lib = make_descriptor("lib")
        builder.results["lib"] = _records(lib, "1.0.0")
        cache = _cache(builder)
        await cache.rebuild(lib)
        before = cache.versions("lib")

        builder.results["lib"] = []
        assert await cache.rebuild(lib) is False
        assert cache.versions("lib") is before

    @pytest.mark.asyncio
    async def test_empty_result_on_absent_slot(self) -> None:
        cache = _cache(ScriptedBuilder())
        assert await cache.rebuild(make_descriptor("lib")) is False
        assert cache.has_entry("lib") is False

    @pytest.mark.asyncio
    async def test_setup_failure_logged_and_slot_untouched(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        builder = ScriptedBuilder()
        lib = make_descriptor("lib")
        builder.results["lib"] = _records(lib, "1.0.0")
        cache = _cache(builder)
        await cache.rebuild(lib)

        builder.fail_setup.add("lib")
        with caplog.at_level(
            logging.WARNING, logger="pommapper.services.cache"
        ):
            assert await cache.rebuild(lib) is False
        assert cache.version_count("lib") == 1
        assert (
            "event=cache_rebuild_failed artifact=lib scope=artifact"
            in caplog.text
        )


class TestAtomicity:
    @pytest.mark.asyncio
    async def test_reader_sees_old_slot_until_swap(self) -> None:
        builder = ScriptedBuilder()
        lib = make_descriptor("lib")
        other = make_descriptor("other", artifact_name="other")
        builder.results["lib"] = _records(lib, "1.0.0")
        builder.results["other"] = _records(other, "3.0.0")
        cache = _cache(builder)
        await cache.rebuild(lib)
        await cache.rebuild(other)
        other_before = cache.versions("other")

        builder.results["lib"] = _records(lib, "1.0.0", "1.1.0", "1.2.0")
        builder.gates["lib"] = asyncio.Event()
        task = asyncio.create_task(cache.rebuild(lib))
        await asyncio.sleep(0)

        # Rebuild in flight: old complete list, other slot unaffected
        assert cache.version_count("lib") == 1
        assert cache.versions("other") is other_before

        builder.gates["lib"].set()
        assert await task is True
        assert cache.version_count("lib") == 3
        assert cache.versions("other") is other_before

    @pytest.mark.asyncio
    async def test_other_ids_rebuild_while_one_is_blocked(self) -> None:
        builder = ScriptedBuilder()
        lib = make_descriptor("lib")
        other = make_descriptor("other", artifact_name="other")
        builder.results["lib"] = _records(lib, "1.0.0")
        builder.results["other"] = _records(other, "3.0.0")
        builder.gates["lib"] = asyncio.Event()
        cache = _cache(builder)

        blocked = asyncio.create_task(cache.rebuild(lib))
        await asyncio.sleep(0)
        assert await asyncio.wait_for(cache.rebuild(other), timeout=1) is True
        assert cache.has_entry("lib") is False

        builder.gates["lib"].set()
        assert await blocked is True

    @pytest.mark.asyncio
    async def test_same_id_rebuilds_last_writer_wins(self) -> None:
        builder = ScriptedBuilder()
        lib = make_descriptor("lib")
        builder.results["lib"] = _records(lib, "1.0.0")
        builder.gates["lib"] = asyncio.Event()
        cache = _cache(builder)

        first = asyncio.create_task(cache.rebuild(lib))
        await asyncio.sleep(0)
        builder.results["lib"] = _records(lib, "1.0.0", "2.0.0")
        second = asyncio.create_task(cache.rebuild(lib))
        builder.gates["lib"].set()
        await asyncio.gather(first, second)

        assert builder.calls == ["lib", "lib"]
        assert cache.version_count("lib") == 2


class TestPrune:
    @pytest.mark.asyncio
    async def test_prune_drops_unconfigured_slots(self) -> None:
        builder = ScriptedBuilder()
        lib = make_descriptor("lib")
        old = make_descriptor("old", artifact_name="old")
        builder.results["lib"] = _records(lib, "1.0.0")
        builder.results["old"] = _records(old, "0.1.0")
        cache = _cache(builder)
        await cache.rebuild(lib)
        await cache.rebuild(old)

        assert cache.prune(["lib"]) == ["old"]
        assert cache.artifact_ids() == ["lib"]

    @pytest.mark.asyncio
    async def test_rebuild_finishing_after_prune_is_discarded(self) -> None:
        builder = ScriptedBuilder()
        old = make_descriptor("old", artifact_name="old")
        builder.results["old"] = _records(old, "0.1.0")
        builder.gates["old"] = asyncio.Event()
        cache = _cache(builder)

        in_flight = asyncio.create_task(cache.rebuild(old))
        await asyncio.sleep(0)
        cache.prune(["lib"])
        builder.gates["old"].set()

        assert await in_flight is False
        assert cache.has_entry("old") is False

    @pytest.mark.asyncio
    async def test_retained_ids_still_rebuild_after_prune(self) -> None:
        builder = ScriptedBuilder()
        lib = make_descriptor("lib")
        builder.results["lib"] = _records(lib, "1.0.0")
        cache = _cache(builder)

        cache.prune(["lib"])

        assert await cache.rebuild(lib) is True
        assert cache.has_entry("lib")


@pytest.mark.asyncio
async def test_end_to_end_with_real_builder(storage: InMemoryStorage) -> None:
    put_version(storage, "2.0.0", "<project><broken></project>")
    cache = VersionCache(VersionRecordBuilder(storage))

    assert await cache.rebuild(make_descriptor()) is True

    records = cache.versions("lib")
    assert len(records) == 1
    assert records[0].resolved_version == "1.0.0"
    assert records[0].extracted == {"apiLevel": "7"}
    assert records[0].primary_location.endswith("mylib-1.0.0.jar")


@pytest.mark.asyncio
async def test_missing_artifact_directory_fails_rebuild() -> None:
    storage = InMemoryStorage()
    storage.add_repository("releases")
    put_version(storage, "1.0.0", make_pom(), gav="com/example/other")
    cache = VersionCache(VersionRecordBuilder(storage))

    assert await cache.rebuild(make_descriptor()) is False
    assert cache.has_entry("lib") is False
