"""Build file write-back service."""

from .service import BuildFileWriterService

__all__ = ["BuildFileWriterService"]
