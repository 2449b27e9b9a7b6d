"""Discovery, record building, caching, validation and the query facade."""

from pommapper.services.builder import VersionRecordBuilder
from pommapper.services.cache import VersionCache
from pommapper.services.discovery import VersionDiscovery
from pommapper.services.facade import PomMapperFacade, RebuildSummary
from pommapper.services.validation import ValidationResult

__all__ = [
    "PomMapperFacade",
    "RebuildSummary",
    "ValidationResult",
    "VersionCache",
    "VersionDiscovery",
    "VersionRecordBuilder",
]
