"""
Configuration management for docwatch.

Uses pydantic-settings to load configuration from environment variables
(prefixed ``DOCWATCH_``) and .env files.
"""

import os
from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

from docwatch.utils.helpers import safe_path


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Watch Configuration
    watch_root: Path = Path("./data")
    ignore_patterns: str = r"\.#.*"
    type_routes: str = "images/=image,posts/=post"

    # MongoDB Configuration
    mongo_uri: str = "mongodb://localhost:27017"
    database_name: str = "docwatch"
    image_collection: str = "images"
    post_collection: str = "posts"

    # Store timeouts (milliseconds)
    server_selection_timeout_ms: int = 5000
    connect_timeout_ms: int = 5000
    socket_timeout_ms: int = 10000

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="DOCWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_watch_root(self) -> Path:
        """Absolute path of the directory tree to watch."""
        return safe_path(str(self.watch_root))

    def get_ignore_patterns(self) -> list[str]:
        """Parse ignore patterns into list."""
        return [p.strip() for p in self.ignore_patterns.split(',') if p.strip()]

    def get_type_routes(self) -> list[tuple[str, str]]:
        """
        Parse type routes into ordered (prefix, kind) pairs.

        Relative prefixes are resolved against the watch root. A trailing
        separator is preserved so ``images/`` does not match ``imagesx/``.
        """
        root = self.get_watch_root()
        routes = []

        for entry in self.type_routes.split(','):
            entry = entry.strip()
            if not entry:
                continue
            if '=' not in entry:
                raise ValueError(f"Route '{entry}' is not in prefix=kind form")

            prefix, kind = (part.strip() for part in entry.rsplit('=', 1))
            absolute = str(safe_path(prefix, base=root))
            if prefix.endswith(('/', os.sep)) and not absolute.endswith(os.sep):
                absolute += os.sep
            routes.append((absolute, kind.lower()))

        return routes


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
