"""Core infrastructure components for nsbackfill."""

from .config import Config, get_config
from .exceptions import (
    BuildFileError,
    ManifestReadError,
    NamespaceBackfillError,
    ProjectLayoutError,
    ServiceError,
)
from .logging import get_logger, setup_logging
from .types import ServiceResult

__all__ = [
    "Config",
    "get_config",
    "BuildFileError",
    "ManifestReadError",
    "NamespaceBackfillError",
    "ProjectLayoutError",
    "ServiceError",
    "get_logger",
    "setup_logging",
    "ServiceResult",
]
