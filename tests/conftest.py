"""Shared fixtures for release_manager tests."""

import sys

import pytest
from loguru import logger

from release_manager.utils.config import reset_config


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Isolate tests from the cached config and the caller's environment."""
    for var in (
        "GITHUB_TOKEN",
        "RELEASE_MANAGER_API_URL",
        "RELEASE_MANAGER_HISTORY",
        "RELEASE_MANAGER_TIMEOUT",
        "RELEASE_MANAGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def _restore_log_sink():
    """The CLI replaces loguru sinks; put back one that follows sys.stderr."""
    yield
    logger.remove()
    logger.add(lambda message: sys.stderr.write(message), level="DEBUG")
