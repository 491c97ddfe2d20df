"""Root pytest configuration for all tests."""

from __future__ import annotations

import pytest

# Redundant with asyncio_mode in pyproject.toml but keeps the plugin explicit
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture(autouse=True)
def _reset_cached_config():
    """Keep the global config cache from leaking between tests."""
    from terminalsync.config import reset_config

    reset_config()
    yield
    reset_config()
