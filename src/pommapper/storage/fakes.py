"""In-memory fake storage for testing.

Dict-backed StorageProvider. Directories are implied by file paths.
No I/O: instant operations for unit tests.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from pommapper.constants import FileKind
from pommapper.errors import StorageError, StorageNotFoundError


class InMemoryStorage:
    """Dict-backed StorageProvider for testing."""

    def __init__(self) -> None:
        self._repos: dict[str, dict[str, bytes]] = {}
        self._broken: set[tuple[str, str]] = set()
        self.fetch_calls: list[tuple[str, str]] = []

    # ── Seeding ──────────────────────────────────────────

    def add_repository(self, repository: str) -> None:
        self._repos.setdefault(repository, {})

    def put(self, repository: str, path: str, content: bytes | str) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.add_repository(repository)
        self._repos[repository][_norm(path)] = content

    def break_path(self, repository: str, path: str) -> None:
        """Make ``file_kind`` and ``fetch_content`` fail for ``path``."""
        self._broken.add((repository, _norm(path)))

    # ── StorageProvider ──────────────────────────────────

    async def repository_exists(self, repository: str) -> bool:
        return repository in self._repos

    async def list_entries(self, repository: str, path: str) -> list[str]:
        files = self._files(repository)
        base = _norm(path)
        if not self._is_dir(files, base):
            msg = f"Directory not found: {repository}/{path}"
            raise StorageNotFoundError(msg)
        prefix = f"{base}/" if base else ""
        children: list[str] = []
        for file_path in files:
            if not file_path.startswith(prefix):
                continue
            child = file_path[len(prefix):].split("/", 1)[0]
            entry = f"{prefix}{child}"
            if entry not in children:
                children.append(entry)
        return sorted(children)

    async def file_kind(self, repository: str, path: str) -> FileKind:
        files = self._files(repository)
        key = _norm(path)
        if (repository, key) in self._broken:
            msg = f"Cannot inspect {repository}/{path}"
            raise StorageError(msg)
        if key in files:
            return FileKind.FILE
        if self._is_dir(files, key):
            return FileKind.DIRECTORY
        msg = f"File not found: {repository}/{path}"
        raise StorageNotFoundError(msg)

    async def fetch_content(self, repository: str, path: str) -> bytes:
        files = self._files(repository)
        key = _norm(path)
        self.fetch_calls.append((repository, key))
        if (repository, key) in self._broken:
            msg = f"Cannot read {repository}/{path}"
            raise StorageError(msg)
        if key not in files:
            msg = f"File not found: {repository}/{path}"
            raise StorageNotFoundError(msg)
        return files[key]

    async def exists(self, repository: str, path: str) -> bool:
        files = self._repos.get(repository)
        if files is None:
            return False
        key = _norm(path)
        return key in files or self._is_dir(files, key)

    # ── Helpers ──────────────────────────────────────────

    def _files(self, repository: str) -> dict[str, bytes]:
        files = self._repos.get(repository)
        if files is None:
            msg = f"Repository not found: {repository}"
            raise StorageNotFoundError(msg)
        return files

    @staticmethod
    def _is_dir(files: dict[str, bytes], key: str) -> bool:
        if not key:
            return True
        prefix = f"{key}/"
        return any(p.startswith(prefix) for p in files)


def _norm(path: str) -> str:
    path = path.strip("/")
    return str(PurePosixPath(path)) if path else ""
