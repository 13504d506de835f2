"""
Secrets management utilities for release_manager.

Provides validation of required secrets by run mode.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class SecretDefinition:
    """Definition of a required secret."""

    name: str
    env_var: str
    required_for: list[str]  # ['publish']
    description: str


REQUIRED_SECRETS = [
    SecretDefinition(
        name="GitHub Token",
        env_var="GITHUB_TOKEN",
        required_for=["publish"],
        description="Required to create, upload and delete releases"
    ),
]


def validate_secrets(mode: str) -> tuple[bool, list[str]]:
    """
    Validate required secrets are set for the given run mode.

    Args:
        mode: Run mode ('publish' or 'dry-run')

    Returns:
        Tuple of (all_valid, list_of_missing_secret_names)
    """
    missing = []

    for secret in REQUIRED_SECRETS:
        if mode in secret.required_for:
            value = os.getenv(secret.env_var)
            if not value or not value.strip():
                missing.append(secret.name)

    return len(missing) == 0, missing
