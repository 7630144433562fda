"""
Custom exception hierarchy for nsbackfill.

All exceptions inherit from NamespaceBackfillError so the CLI can turn any of
them into a clean failure. Each exception type carries context for logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class NamespaceBackfillError(Exception):
    """Base exception for all nsbackfill errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class ServiceError(NamespaceBackfillError):
    """Raised when a service operation fails."""

    service_name: str = ""
    operation: str = ""

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.service_name}.{self.operation}]: {base}"


@dataclass
class ManifestReadError(ServiceError):
    """Raised when an existing manifest cannot be read or decoded.

    This aborts the whole backfill run; there is no retry.
    """

    manifest_path: str = ""

    def __post_init__(self) -> None:
        self.service_name = "backfill"
        self.operation = self.operation or "read_manifest"


@dataclass
class ProjectLayoutError(NamespaceBackfillError):
    """Raised when a directory does not look like a Gradle project."""

    root: str = ""

    def __str__(self) -> str:
        return f"Invalid project layout at '{self.root}': {super().__str__()}"


@dataclass
class BuildFileError(NamespaceBackfillError):
    """Raised when a module build file cannot be updated."""

    build_file: str = ""

    def __str__(self) -> str:
        return f"Build file '{self.build_file}': {super().__str__()}"
