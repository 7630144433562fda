"""
Gradle project models.

A module's Android extension is classified once, when the module graph is
built, into a closed set of variants. Consumers match on ``kind`` instead of
inspecting extension types at runtime.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from ..core.config import DEFAULT_MANIFEST_PATH


class ExtensionKind(str, Enum):
    """Android extension variants a module can carry."""

    LIBRARY = "library"
    APPLICATION = "application"


class AndroidExtension(BaseModel):
    """Mutable Android build extension attached to a module."""

    kind: ExtensionKind = Field(description="Which Android plugin the module applies")
    namespace: str | None = Field(default=None, description="Declared or inferred namespace")

    @property
    def has_namespace(self) -> bool:
        """True only for a non-empty namespace."""
        return bool(self.namespace)


class Module(BaseModel):
    """A node of the Gradle build graph."""

    name: str = Field(description="Gradle project path, e.g. :app")
    project_dir: Path = Field(description="Module root directory")
    extension: AndroidExtension | None = Field(default=None)
    build_file: Path | None = Field(default=None, description="build.gradle(.kts) if present")

    @property
    def is_library(self) -> bool:
        return self.extension is not None and self.extension.kind == ExtensionKind.LIBRARY

    @property
    def namespace(self) -> str | None:
        return self.extension.namespace if self.extension else None

    def manifest_path(self, relative_path: str = DEFAULT_MANIFEST_PATH) -> Path:
        """Location of the module's AndroidManifest.xml.

        Args:
            relative_path: Manifest path relative to ``project_dir``.

        Returns:
            Path: The manifest path (it may not exist).
        """
        return self.project_dir / relative_path
