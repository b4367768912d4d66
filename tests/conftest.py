"""
Pytest fixtures for civitai-client tests.
"""

import pytest

from civitai_client.client import initialize_registry
from civitai_client.config import Settings, get_settings
from civitai_client.kernel.registry import get_registry, reset_registry
from tests.fakes import FakeTransport


@pytest.fixture(autouse=True)
def fresh_registry():
    """Every test starts from a freshly initialized process registry and default settings."""
    reset_registry()
    get_settings.cache_clear()
    initialize_registry()
    yield get_registry()
    reset_registry()
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        base_url="https://civitai.test",
        orchestration_base_url="https://orchestration.civitai.test",
        api_key="test-key",
        _env_file=None,
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
