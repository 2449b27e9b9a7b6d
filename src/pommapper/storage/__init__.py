"""Storage boundary: protocol plus filesystem and in-memory providers."""

from pommapper.storage.fakes import InMemoryStorage
from pommapper.storage.filesystem import FileSystemStorage
from pommapper.storage.protocols import StorageProvider

__all__ = ["FileSystemStorage", "InMemoryStorage", "StorageProvider"]
