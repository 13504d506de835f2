"""Startup validation for release_manager.

Provides fail-fast validation of required configuration and secrets.
"""

from __future__ import annotations

from loguru import logger

from release_manager.exceptions import ConfigError
from release_manager.utils.secrets import validate_secrets


def validate_startup(dry_run: bool = False) -> list[str]:
    """
    Validate all required config before a run.

    Args:
        dry_run: Whether the run skips remote operations

    Returns:
        List of error messages. Empty if all valid.
    """
    errors = []
    mode = "dry-run" if dry_run else "publish"

    valid, missing = validate_secrets(mode)
    if not valid:
        for name in missing:
            errors.append(f"Missing required secret: {name}")

    return errors


def fail_fast_startup(dry_run: bool = False) -> None:
    """
    Validate startup and raise if invalid.

    Raises:
        ConfigError: If required configuration is missing.
    """
    errors = validate_startup(dry_run=dry_run)
    if errors:
        error_msg = "Startup validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        logger.error(error_msg)
        raise ConfigError(error_msg)

    logger.debug("Startup validation passed")
