"""Settings validation: naming conventions and existence checks.

Results are created fresh per pass and printed through warn/info
sinks filtered by a :class:`ValidationLogLevel`.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from pommapper.constants import (
    ARTIFACT_ID_PATTERN,
    DETAIL_PREFIX,
    GROUP_ID_PATTERN,
    SEMANTICS_HEADER,
    SYNTAX_HEADER,
    VISIBLE_SEVERITIES,
    ValidationLogLevel,
    ValidationType,
)
from pommapper.models.artifact import ArtifactDescriptor
from pommapper.models.settings import MapperSettings

_GROUP_ID_RE = re.compile(GROUP_ID_PATTERN)
_ARTIFACT_ID_RE = re.compile(ARTIFACT_ID_PATTERN)

Printer = Callable[[str], object]


class ExistenceChecker(Protocol):
    async def is_repository_known(self, repository: str) -> bool: ...
    async def has_artifact(self, repository: str, path: str) -> bool: ...


@dataclass(frozen=True)
class ValidationResult:
    """One validation message with its severity and detail lines."""

    message: str
    severity: ValidationType
    details: tuple[str, ...] = field(default_factory=tuple)

    def is_visible(self, level: ValidationLogLevel) -> bool:
        return self.severity in VISIBLE_SEVERITIES[level]

    def print(
        self,
        warn: Printer,
        info: Printer,
        level: ValidationLogLevel,
    ) -> None:
        if not self.is_visible(level):
            return
        printer = warn if self.severity == ValidationType.ERROR else info
        printer(self.message)
        for detail in self.details:
            printer(f"{DETAIL_PREFIX}{detail}")

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "severity": str(self.severity),
            "details": list(self.details),
        }


def print_block(
    results: Iterable[ValidationResult],
    warn: Printer,
    info: Printer,
    level: ValidationLogLevel,
) -> None:
    """Print every result visible at ``level``."""
    for result in results:
        result.print(warn, info, level)


def _matches(pattern: re.Pattern[str], value: str | None) -> bool:
    if value is None or not value.strip():
        return False
    return pattern.match(value) is not None


def validate_naming_convention(
    descriptor: ArtifactDescriptor,
) -> ValidationResult:
    """Check groupId and artifactId against Apache Maven conventions."""
    errors: list[str] = []
    if not _matches(_GROUP_ID_RE, descriptor.group_id):
        errors.append(f"Poor 'groupId': \"{descriptor.group_id}\"")
    if not _matches(_ARTIFACT_ID_RE, descriptor.artifact_name):
        errors.append(f"Poor 'artifactId': \"{descriptor.artifact_name}\"")
    if errors:
        return ValidationResult(
            f'"{descriptor.id}": Apache Maven naming conventions '
            "for entry violated.",
            ValidationType.ERROR,
            tuple(errors),
        )
    return ValidationResult(
        f"\"{descriptor.id}\"'s naming is valid.",
        ValidationType.SUCCESS,
    )


async def validate_existence(
    descriptor: ArtifactDescriptor,
    checker: ExistenceChecker,
) -> ValidationResult:
    """Check the repository is known and the gav exists in it."""
    errors: list[str] = []
    repository = descriptor.repository
    gav = descriptor.gav()
    if not await checker.is_repository_known(repository):
        errors.append(f'Unknown repository: "{repository}"')
    if not await checker.has_artifact(repository, gav):
        errors.append(f'Artifact not found in path: "{repository}/{gav}"')
    if errors:
        return ValidationResult(
            f'Entry "{descriptor.id}" has issues:',
            ValidationType.ERROR,
            tuple(errors),
        )
    return ValidationResult(
        f"Entry \"{descriptor.id}\"'s artifact can be found and accessed.",
        ValidationType.SUCCESS,
    )


async def validate_settings(
    settings: MapperSettings,
    checker: ExistenceChecker,
) -> list[ValidationResult]:
    """Run the enabled validation sections over all configured artifacts."""
    results: list[ValidationResult] = []
    if settings.validation_log_level == ValidationLogLevel.IGNORE_ALL:
        return results

    if settings.naming_convention_warning:
        results.append(ValidationResult(SYNTAX_HEADER, ValidationType.INFO))
        results.extend(
            validate_naming_convention(a) for a in settings.artifacts
        )

    if settings.run_existence_checks:
        results.append(
            ValidationResult(SEMANTICS_HEADER, ValidationType.INFO)
        )
        for artifact in settings.artifacts:
            results.append(await validate_existence(artifact, checker))

    return results
