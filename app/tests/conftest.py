"""Shared pytest configuration."""

import pytest
import structlog

from infrastructure.configuration import get_settings


@pytest.fixture(autouse=True)
def _reset_logging_context():
    """Keep structlog context variables from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def clear_settings_cache():
    """Drop the cached Settings so environment changes are picked up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
