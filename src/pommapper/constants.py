"""Shared constants: single source of truth for cross-module values.

StrEnum members are str-compatible, so YAML settings and JSON
payloads carry the plain names unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class ValidationLogLevel(StrEnum):
    """How much validation output is printed."""

    ALL = "ALL"
    INFO = "INFO"
    ERRORS_ONLY = "ERRORS_ONLY"
    IGNORE_ALL = "IGNORE_ALL"


class ValidationType(StrEnum):
    """Severity of a single validation result."""

    SUCCESS = "SUCCESS"
    INFO = "INFO"
    ERROR = "ERROR"
    NONE = "NONE"


class FileKind(StrEnum):
    """Kind of a storage entry."""

    FILE = "file"
    DIRECTORY = "directory"


# Severities printed at each log level.
VISIBLE_SEVERITIES: dict[ValidationLogLevel, frozenset[ValidationType]] = {
    ValidationLogLevel.ALL: frozenset(ValidationType),
    ValidationLogLevel.INFO: frozenset({
        ValidationType.INFO,
        ValidationType.ERROR,
        ValidationType.NONE,
    }),
    ValidationLogLevel.ERRORS_ONLY: frozenset({
        ValidationType.ERROR,
        ValidationType.NONE,
    }),
    ValidationLogLevel.IGNORE_ALL: frozenset({ValidationType.NONE}),
}

# ── Maven Layout ─────────────────────────────────────────

METADATA_EXTENSION = "pom"
PRIMARY_EXTENSION = "jar"
SNAPSHOT_SUFFIX = "-SNAPSHOT"

# Apache Maven naming conventions
GROUP_ID_PATTERN = r"^[a-z][a-z0-9_.]*$"
ARTIFACT_ID_PATTERN = r"^[a-z0-9-]+$"

# ── Validation Messages ──────────────────────────────────

SYNTAX_HEADER = "Running syntax tests..."
SEMANTICS_HEADER = "Running semantics tests..."
DETAIL_PREFIX = " > "

# ── REST API ─────────────────────────────────────────────

API_ROOT = "/api/pommapper"
SNAPSHOTS_QPARAM = "snapshots"
RELEASES_QPARAM = "releases"

# ── Admin Auth ───────────────────────────────────────

API_KEY_HEADER = "X-API-Key"

# Route groups guarded by the API key; everything else is public
ADMIN_PATH_PREFIXES = (
    f"{API_ROOT}/cache",
    f"{API_ROOT}/settings",
    f"{API_ROOT}/events",
    f"{API_ROOT}/validation",
)
