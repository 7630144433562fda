"""
Namespace Backfill Service.

Fills in the missing ``namespace`` of legacy Android library modules from the
``package`` attribute of their AndroidManifest.xml.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from ...core.config import Config, DEFAULT_MANIFEST_PATH, get_config
from ...core.exceptions import ManifestReadError
from ...core.logging import get_logger, module_context
from ...core.types import ServiceResult
from ...models.project import Module

logger = get_logger(__name__)

PACKAGE_PATTERN = re.compile(r"""package\s*=\s*["']([^"']+)["']""")


class OutcomeStatus(str, Enum):
    """What the backfill did with a single module."""

    BACKFILLED = "backfilled"
    ALREADY_SET = "already_set"
    SKIPPED_NO_EXTENSION = "skipped_no_extension"
    SKIPPED_NOT_LIBRARY = "skipped_not_library"
    SKIPPED_NO_MANIFEST = "skipped_no_manifest"
    NO_PACKAGE = "no_package"


class ModuleOutcome(BaseModel):
    """Backfill result for one module."""

    module: str = Field(description="Gradle project path")
    status: OutcomeStatus
    namespace_before: str | None = Field(default=None)
    namespace_after: str | None = Field(default=None)
    manifest_path: Path | None = Field(default=None)
    package_occurrences: int = Field(default=0, description="package= matches in the manifest")

    @property
    def changed(self) -> bool:
        return self.status == OutcomeStatus.BACKFILLED


class BackfillReport(BaseModel):
    """Outcomes of one backfill run, in module order."""

    outcomes: list[ModuleOutcome] = Field(default_factory=list)

    @property
    def backfilled(self) -> list[ModuleOutcome]:
        return [o for o in self.outcomes if o.changed]

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    def summary(self) -> dict[str, int]:
        """Count of modules per status, statuses without modules omitted."""
        return {s.value: self.count(s) for s in OutcomeStatus if self.count(s)}


def extract_package(text: str) -> str | None:
    """Return the first ``package="..."`` value found in manifest text.

    Only the first occurrence is used, even when a nested or templated node
    declares another one later in the document.

    Args:
        text: Full manifest content.

    Returns:
        The captured package identifier, or None if there is no match.
    """
    match = PACKAGE_PATTERN.search(text)
    return match.group(1) if match else None


def read_manifest(path: Path, encoding: str = "utf-8") -> str:
    """Read an existing manifest, wrapping I/O and decode failures.

    Raises:
        ManifestReadError: If the file exists but cannot be read or decoded.
    """
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(
            message=f"Cannot read manifest: {path}",
            context={"encoding": encoding},
            cause=e,
            manifest_path=str(path),
        ) from e


def backfill_module(
    module: Module,
    manifest_relative_path: str = DEFAULT_MANIFEST_PATH,
    encoding: str = "utf-8",
) -> ModuleOutcome:
    """Backfill a single module's namespace in place.

    Args:
        module: Module whose extension may be mutated.
        manifest_relative_path: Manifest location under the module directory.
        encoding: Manifest text encoding.

    Returns:
        ModuleOutcome describing what happened.

    Raises:
        ManifestReadError: If an existing manifest cannot be read.
    """
    extension = module.extension
    if extension is None:
        return ModuleOutcome(module=module.name, status=OutcomeStatus.SKIPPED_NO_EXTENSION)
    if not module.is_library:
        return ModuleOutcome(
            module=module.name,
            status=OutcomeStatus.SKIPPED_NOT_LIBRARY,
            namespace_before=extension.namespace,
            namespace_after=extension.namespace,
        )

    before = extension.namespace
    if extension.has_namespace:
        return ModuleOutcome(
            module=module.name,
            status=OutcomeStatus.ALREADY_SET,
            namespace_before=before,
            namespace_after=before,
        )

    manifest = module.manifest_path(manifest_relative_path)
    if not manifest.is_file():
        logger.debug("No manifest, leaving namespace empty", path=str(manifest))
        return ModuleOutcome(
            module=module.name,
            status=OutcomeStatus.SKIPPED_NO_MANIFEST,
            namespace_before=before,
            namespace_after=before,
            manifest_path=manifest,
        )

    content = read_manifest(manifest, encoding)
    occurrences = len(PACKAGE_PATTERN.findall(content))
    package = extract_package(content)

    if package is None:
        logger.info("Manifest has no package attribute", path=str(manifest))
        return ModuleOutcome(
            module=module.name,
            status=OutcomeStatus.NO_PACKAGE,
            namespace_before=before,
            namespace_after=before,
            manifest_path=manifest,
        )

    if occurrences > 1:
        logger.warning(
            "Manifest declares several package attributes, using the first",
            path=str(manifest),
            occurrences=occurrences,
            namespace=package,
        )

    extension.namespace = package
    logger.info("Namespace backfilled", namespace=package)
    return ModuleOutcome(
        module=module.name,
        status=OutcomeStatus.BACKFILLED,
        namespace_before=before,
        namespace_after=package,
        manifest_path=manifest,
        package_occurrences=occurrences,
    )


def backfill(
    modules: Iterable[Module],
    manifest_relative_path: str = DEFAULT_MANIFEST_PATH,
    encoding: str = "utf-8",
) -> None:
    """Backfill missing namespaces of library modules in place.

    Modules are independent; running this twice leaves the state of the first
    run unchanged.

    Raises:
        ManifestReadError: If an existing manifest cannot be read. Modules
            processed before the failure keep their new namespace.
    """
    for module in modules:
        with module_context(module.name):
            backfill_module(module, manifest_relative_path, encoding)


class NamespaceBackfillService:
    """Service running the backfill over a module graph and reporting it."""

    def __init__(self, config: Config | None = None) -> None:
        """Initialize the backfill service.

        Args:
            config: Configuration; defaults to the cached environment config.
        """
        self.config = config or get_config()

    def run(self, modules: Iterable[Module]) -> ServiceResult[BackfillReport]:
        """Backfill every module and collect per-module outcomes.

        Args:
            modules: The build graph's modules.

        Returns:
            ServiceResult wrapping a BackfillReport. Manifests with several
            package attributes are listed as warnings.

        Raises:
            ManifestReadError: Propagated unchanged; the run is aborted.
        """
        report = BackfillReport()
        warnings: list[str] = []

        for module in modules:
            with module_context(module.name):
                outcome = backfill_module(
                    module,
                    self.config.manifest.relative_path,
                    self.config.manifest.encoding,
                )
            report.outcomes.append(outcome)
            if outcome.package_occurrences > 1:
                warnings.append(
                    f"{module.name}: {outcome.package_occurrences} package attributes in "
                    f"{outcome.manifest_path}, used the first ({outcome.namespace_after})"
                )

        logger.info("Backfill complete", **report.summary())

        if warnings:
            return ServiceResult.with_warnings(report, warnings, modules=len(report.outcomes))
        return ServiceResult.ok(report, modules=len(report.outcomes))
