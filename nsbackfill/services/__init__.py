"""Services package for nsbackfill."""

from .backfill import NamespaceBackfillService
from .discovery import ProjectDiscoveryService
from .writer import BuildFileWriterService

__all__ = [
    "NamespaceBackfillService",
    "ProjectDiscoveryService",
    "BuildFileWriterService",
]
