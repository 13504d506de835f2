"""
Runtime configuration for release_manager.

Values are read from environment variables once and cached; CLI flags
override them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_HISTORY_FILE = "releases.json"
DEFAULT_TIMEOUT = 60.0
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class Config:
    """
    Release manager configuration.

    Attributes:
        github_token: API token for the hosting platform (GITHUB_TOKEN)
        api_url: Base URL of the GitHub REST API
        history_path: Path of the release history JSON file
        timeout: Per-request timeout in seconds
        log_level: Loguru level for console output
    """

    github_token: str | None = None
    api_url: str = DEFAULT_API_URL
    history_path: Path = Path(DEFAULT_HISTORY_FILE)
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Config":
        """Build configuration from environment variables."""
        token = os.getenv("GITHUB_TOKEN")
        if token is not None and not token.strip():
            token = None

        return cls(
            github_token=token,
            api_url=os.getenv("RELEASE_MANAGER_API_URL", DEFAULT_API_URL).rstrip("/"),
            history_path=Path(os.getenv("RELEASE_MANAGER_HISTORY", DEFAULT_HISTORY_FILE)),
            timeout=_float_from_env("RELEASE_MANAGER_TIMEOUT", DEFAULT_TIMEOUT),
            log_level=_log_level_from_env("RELEASE_MANAGER_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive, using default {default}")
        return default
    return value


def _log_level_from_env(name: str, default: str) -> str:
    level = os.getenv(name, default).strip().upper()
    try:
        logger.level(level)
    except ValueError:
        logger.warning(f"Unknown {name}={level!r}, using default {default}")
        return default
    return level


_config: Config | None = None


def get_config() -> Config:
    """Get the cached configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Clear the cached configuration (used by tests)."""
    global _config
    _config = None
