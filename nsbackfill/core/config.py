"""
Configuration management for nsbackfill.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for discovery, backfill and write-back.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()

DEFAULT_MANIFEST_PATH = "src/main/AndroidManifest.xml"


class ManifestConfig(BaseModel):
    """Where and how module manifests are read."""

    relative_path: str = Field(
        default=DEFAULT_MANIFEST_PATH,
        description="Manifest location relative to the module directory",
    )
    encoding: str = Field(default="utf-8", description="Manifest text encoding")


class WriterConfig(BaseModel):
    """Build file write-back configuration."""

    enabled: bool = Field(default=False, description="Persist namespaces into build files")
    indent: str = Field(default="    ", description="Indent unit for an empty android block")


class Config(BaseModel):
    """Root configuration for nsbackfill."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)
    writer: WriterConfig = Field(default_factory=WriterConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        return cls(
            log_level=os.environ.get("NSB_LOG_LEVEL", "INFO"),  # type: ignore
            manifest=ManifestConfig(
                relative_path=os.environ.get("NSB_MANIFEST_PATH", DEFAULT_MANIFEST_PATH),
                encoding=os.environ.get("NSB_MANIFEST_ENCODING", "utf-8"),
            ),
            writer=WriterConfig(
                enabled=os.environ.get("NSB_WRITE_BACK", "false").lower() == "true",
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
