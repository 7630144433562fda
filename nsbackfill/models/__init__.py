"""Data models for nsbackfill."""

from .project import AndroidExtension, ExtensionKind, Module

__all__ = [
    "AndroidExtension",
    "ExtensionKind",
    "Module",
]
