"""Error taxonomy and recovery-scope classification.

Every failure inside the mapper is recovered at the smallest scope
that contains it:

- RULE: one extraction rule fails, its value is absent
- DOCUMENT: one POM cannot be fetched or parsed, it is skipped
- ARTIFACT: the build cannot start, the cache slot keeps its value
- CONFIGURATION: reported through validation results only
"""

from __future__ import annotations

from enum import Enum


class PomMapperError(Exception):
    """Base class for all mapper errors."""


class ExtractionSetupError(PomMapperError):
    """The XML parser or query engine cannot be constructed."""


class DocumentFetchError(PomMapperError):
    """A metadata document could not be retrieved from storage."""


class DocumentParseError(PomMapperError):
    """A metadata document is not well-formed XML."""


class RuleError(PomMapperError):
    """A single extraction rule failed against a valid document."""

    def __init__(self, rule_id: str, artifact_id: str, cause: str) -> None:
        super().__init__(
            f'Error while reading xPath "{rule_id}" in artifact '
            f'"{artifact_id}" - {cause}'
        )
        self.rule_id = rule_id
        self.artifact_id = artifact_id
        self.cause = cause


class ConfigError(PomMapperError):
    """Settings could not be loaded or are structurally invalid."""


class StorageError(PomMapperError):
    """Storage backend failure."""


class StorageNotFoundError(StorageError):
    """Repository or path does not exist in storage."""


class ErrorScope(Enum):
    RULE = "rule"
    DOCUMENT = "document"
    ARTIFACT = "artifact"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_SCOPES: tuple[tuple[type[BaseException], ErrorScope], ...] = (
    (RuleError, ErrorScope.RULE),
    (DocumentFetchError, ErrorScope.DOCUMENT),
    (DocumentParseError, ErrorScope.DOCUMENT),
    (StorageError, ErrorScope.DOCUMENT),
    (ExtractionSetupError, ErrorScope.ARTIFACT),
    (ConfigError, ErrorScope.CONFIGURATION),
)


def classify_error(error: BaseException) -> ErrorScope:
    """Return the scope at which ``error`` is recovered."""
    for error_type, scope in _SCOPES:
        if isinstance(error, error_type):
            return scope
    return ErrorScope.UNKNOWN


def is_skippable(error: BaseException) -> bool:
    """Return True if the error only costs a rule or one document."""
    return classify_error(error) in (ErrorScope.RULE, ErrorScope.DOCUMENT)
