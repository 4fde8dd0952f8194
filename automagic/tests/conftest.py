"""Unit tests configuration file."""

import pytest

from automagic.codec.registry import ClassRegistry, registry


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def scratch_registry():
    """An empty registry, separate from the default one."""
    return ClassRegistry()


@pytest.fixture
def restore_registry():
    """Drop classes that a test defines from the default registry afterwards."""
    before = set(registry)
    yield registry
    for name in set(registry) - before:
        registry.unregister(name)
