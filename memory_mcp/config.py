"""Configuration settings for memory-mcp."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_DATABASE_URL = "http://localhost:8080"
DEFAULT_SUGGESTED_TAGS = ("homelab", "career", "drinks", "personal")


@dataclass
class Config:
    """memory-mcp configuration."""

    # Database
    database_url: str = DEFAULT_DATABASE_URL
    auth_token: str | None = None

    # Broad categories named in tool descriptions and error messages
    suggested_tags: tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_SUGGESTED_TAGS
    )

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Config:
        """Load configuration from environment variables."""
        suggested = os.environ.get("MEMORY_MCP_SUGGESTED_TAGS")
        suggested_tags = (
            tuple(t.strip() for t in suggested.split(",") if t.strip())
            if suggested
            else DEFAULT_SUGGESTED_TAGS
        )

        return cls(
            database_url=os.environ.get("LIBSQL_URL") or DEFAULT_DATABASE_URL,
            auth_token=os.environ.get("LIBSQL_AUTH_TOKEN") or None,
            suggested_tags=suggested_tags,
            log_level=os.environ.get("MEMORY_MCP_LOG_LEVEL", "INFO").upper(),
        )


_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the config (for testing)."""
    global _config
    _config = None
