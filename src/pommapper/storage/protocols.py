"""Protocol-based storage interface.

Implementations satisfy this protocol structurally (no inheritance).
Paths are repository-relative POSIX strings, e.g. ``com/example/lib``.
"""

from typing import Protocol

from pommapper.constants import FileKind


class StorageProvider(Protocol):
    async def repository_exists(self, repository: str) -> bool: ...
    async def list_entries(
        self, repository: str, path: str
    ) -> list[str]: ...
    async def file_kind(self, repository: str, path: str) -> FileKind: ...
    async def fetch_content(self, repository: str, path: str) -> bytes: ...
    async def exists(self, repository: str, path: str) -> bool: ...
