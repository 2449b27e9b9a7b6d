"""Filesystem-backed storage: one directory per repository under a root."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path, PurePosixPath

from pommapper.constants import FileKind
from pommapper.errors import StorageError, StorageNotFoundError

logger = logging.getLogger(__name__)


class FileSystemStorage:
    """StorageProvider over ``root/<repository>/<path>``.

    Blocking filesystem calls run in worker threads so the event loop
    keeps serving cache reads.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _repository_dir(self, repository: str) -> Path:
        if (
            not repository
            or repository in (".", "..")
            or "/" in repository
            or "\\" in repository
        ):
            msg = f"Invalid repository name: {repository!r}"
            raise StorageNotFoundError(msg)
        return self._root / repository

    def _resolve(self, repository: str, path: str) -> Path:
        repo_dir = self._repository_dir(repository)
        parts = PurePosixPath(path).parts
        # Reject path traversal attempts
        if ".." in parts or PurePosixPath(path).is_absolute():
            msg = f"Invalid storage path: {path!r}"
            raise StorageNotFoundError(msg)
        return repo_dir.joinpath(*parts)

    async def repository_exists(self, repository: str) -> bool:
        try:
            repo_dir = self._repository_dir(repository)
        except StorageNotFoundError:
            return False
        return await asyncio.to_thread(repo_dir.is_dir)

    async def list_entries(self, repository: str, path: str) -> list[str]:
        target = self._resolve(repository, path)

        def _list() -> list[str]:
            if not target.is_dir():
                msg = f"Directory not found: {repository}/{path}"
                raise StorageNotFoundError(msg)
            try:
                names = sorted(child.name for child in target.iterdir())
            except OSError as exc:
                msg = f"Cannot list {repository}/{path}: {exc}"
                raise StorageError(msg) from exc
            return [str(PurePosixPath(path, name)) for name in names]

        return await asyncio.to_thread(_list)

    async def file_kind(self, repository: str, path: str) -> FileKind:
        target = self._resolve(repository, path)

        def _kind() -> FileKind:
            if target.is_dir():
                return FileKind.DIRECTORY
            if target.is_file():
                return FileKind.FILE
            msg = f"File not found: {repository}/{path}"
            raise StorageNotFoundError(msg)

        return await asyncio.to_thread(_kind)

    async def fetch_content(self, repository: str, path: str) -> bytes:
        target = self._resolve(repository, path)

        def _read() -> bytes:
            if not target.is_file():
                msg = f"File not found: {repository}/{path}"
                raise StorageNotFoundError(msg)
            try:
                return target.read_bytes()
            except OSError as exc:
                msg = f"Cannot read {repository}/{path}: {exc}"
                raise StorageError(msg) from exc

        return await asyncio.to_thread(_read)

    async def exists(self, repository: str, path: str) -> bool:
        try:
            target = self._resolve(repository, path)
        except StorageNotFoundError:
            return False
        return await asyncio.to_thread(target.exists)
