"""Shared pytest configuration and fixtures for sllmi tests."""

import pytest

from sllmi.core.config import Config, ConfigSchema
from sllmi.core.provider.key_pool import ApiKeyPool

# Import HTTP mocking fixtures from fixtures module
pytest_plugins = ["tests.fixtures.mock_http"]


def pytest_collection_modifyitems(config, items):
    """Mark everything under tests/ as a unit test; no test reaches a real provider."""
    for item in items:
        item.add_marker(pytest.mark.unit)


@pytest.fixture(scope="function", autouse=True)
def clean_environment(monkeypatch):
    """Start each test from schema defaults.

    Clears every sllmi variable (a developer's .env may have set real keys)
    and rebuilds the Config singleton afterwards.
    """
    for spec in ConfigSchema.all_specs().values():
        monkeypatch.delenv(spec.name, raising=False)
    Config.reset_singleton()
    yield
    monkeypatch.undo()
    Config.reset_singleton()


@pytest.fixture
def reset_config():
    """Rebuild the Config singleton after a test changes the environment."""
    return Config.reset_singleton


@pytest.fixture
def ordered_keys(monkeypatch):
    """Make key pools try keys in configuration order instead of shuffling."""
    monkeypatch.setattr(ApiKeyPool, "shuffled", lambda self: list(self.keys))
