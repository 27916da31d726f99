"""Pytest configuration and shared fixtures for opsgenie-client tests."""

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related environment variables before each test.

    Keeps a developer's real OPSGENIE_API_KEY / OPSGENIE_API_URL from leaking
    into client construction and credential resolution.
    """
    test_prefixes = ("TEST_", "OPSGENIE_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo debug handlers installed by clients built with debug=True."""
    logger = logging.getLogger("opsgenie_client")
    handlers = list(logger.handlers)
    level = logger.level

    yield

    for handler in logger.handlers[:]:
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
