"""Namespace backfill service."""

from .service import (
    BackfillReport,
    ModuleOutcome,
    NamespaceBackfillService,
    OutcomeStatus,
    backfill,
    backfill_module,
    extract_package,
)

__all__ = [
    "BackfillReport",
    "ModuleOutcome",
    "NamespaceBackfillService",
    "OutcomeStatus",
    "backfill",
    "backfill_module",
    "extract_package",
]
