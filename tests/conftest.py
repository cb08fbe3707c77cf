"""
Shared pytest fixtures and configuration for sqlgate tests.

This module provides:
- Settings / default-path isolation (no SQLGATE_* leakage between tests)
- A scripted fake backend registered in a private AdapterRegistry
- Ready-made MappingConfigResolver sections

Usage:
    def test_something(gateway, fake_state):
        gateway.execute_non_query("DELETE FROM t")
        assert fake_state.open_count == 1
"""

import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Ensure sqlgate package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from sqlgate.adapters.registry import AdapterRegistry
from sqlgate.config import MappingConfigResolver, set_default_config_path
from sqlgate.connection import ConnectionFactory
from sqlgate.executor import SqlGateway
from sqlgate.settings import clear_settings_cache

from fakes import FakeAdapter, FakeState


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark everything as unit unless it says otherwise."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """
    Clear SQLGATE_* env vars, the settings cache and the default path.

    Runs from an empty temp directory so a stray ``.env`` or ``SysInfo.xml``
    in the checkout never influences a test.
    """
    for key in [k for k in os.environ if k.startswith("SQLGATE_")]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    set_default_config_path(None)
    yield
    clear_settings_cache()
    set_default_config_path(None)


# =============================================================================
# Fake Backend Fixtures
# =============================================================================

MAIN_SECTION = {
    "DBIP": "10.0.0.7",
    "DBName": "Sales",
    "UID": "app",
    "PWD": "secret",
}


@pytest.fixture
def fake_state() -> FakeState:
    """Scriptable state shared by the fake adapter, its commands and connections."""
    return FakeState()


@pytest.fixture
def registry(fake_state: FakeState) -> AdapterRegistry:
    """Private registry with the fake backend registered as ``fake``."""
    reg = AdapterRegistry()
    reg.register("fake", FakeAdapter.bound(fake_state))
    return reg


@pytest.fixture
def resolver() -> MappingConfigResolver:
    return MappingConfigResolver(
        {
            "SystemInfo": {"DBSection": "Main"},
            "Main": dict(MAIN_SECTION),
            "Reporting": {**MAIN_SECTION, "DBIP": "10.0.0.8", "DBName": "Reports"},
        }
    )


@pytest.fixture
def factory(resolver: MappingConfigResolver, registry: AdapterRegistry) -> ConnectionFactory:
    return ConnectionFactory(resolver, config_source="test.xml", registry=registry)


@pytest.fixture
def gateway(factory: ConnectionFactory, fake_state: FakeState) -> SqlGateway:
    """Gateway over the fake backend, reporting into ``fake_state.sink``."""
    return SqlGateway("fake", factory=factory, sink=fake_state.sink)
