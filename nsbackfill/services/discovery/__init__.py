"""Gradle project discovery service."""

from .service import ProjectDiscoveryService, discover_project

__all__ = ["ProjectDiscoveryService", "discover_project"]
