"""
Configuration management for id_resolver.

Uses pydantic-settings for environment variable loading and validation.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ID_RESOLVER_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Source files live at <rootpath><source suffix>, e.g. /data/resolver/zfin
    resolver_file_rootpath: str = Field(
        default="",
        description="Root path prepended to each source's file suffix",
    )

    # Cache
    cache_file: Path = Field(
        default=Path("build/idresolver.cache"),
        description="Flat file holding every completed partition between runs",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    def source_path(self, suffix: str) -> Path | None:
        """
        Build the raw source file path for a source suffix.

        The root is used as a string prefix, not a directory, so a root of
        "/data/" and a suffix of "zfin" give "/data/zfin".

        Returns:
            Path to the source file, or None if no root path is configured
        """
        root = self.resolver_file_rootpath.strip()
        if not root:
            return None
        return Path(root + suffix)


# Global settings instance
settings = Settings()
