"""Pytest configuration and shared fixtures.

This module provides:
- Common test fixtures for data directories, environments and stores
- Pytest markers for test categorization (unit, integration)
"""
import tempfile
from pathlib import Path
from typing import Dict, Generator

import pytest

from config.constants import MARKERS
from config.environment import BuildFlags, EnvironmentResolver
from config.logging_config import set_log_environment
from config.registry import ConfigurationRegistry
from storage.preferences import JsonPreferences
from tests.mocks import MockPreferences


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: mark test as a unit test (fast, isolated)")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# =============================================================================
# Process State Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_process_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Strip ShareBudget variables from os.environ and forget the logged environment."""
    for name in (
        MARKERS.TEST_CONFIGURATION_VAR,
        MARKERS.DEVELOPMENT_LOCAL_VAR,
        MARKERS.DEVELOPMENT_REMOTE_VAR,
        MARKERS.DATA_DIR_VAR,
    ):
        monkeypatch.delenv(name, raising=False)
    set_log_environment(None)
    yield
    set_log_environment(None)


@pytest.fixture
def test_marker_environ() -> Dict[str, str]:
    """Process environment as set up by the test harness."""
    return {MARKERS.TEST_CONFIGURATION_VAR: "/tmp/run/ShareBudgetTests.testconfiguration"}


# =============================================================================
# Directory and Path Fixtures
# =============================================================================


@pytest.fixture
def temp_data_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_json_path(temp_data_dir: Path) -> Path:
    """Path for a temporary JSON preferences file."""
    return temp_data_dir / "ShareBudgetTest.json"


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def make_registry():
    """Factory building a registry for given build flags and environ."""

    def _make(build_flags: BuildFlags = BuildFlags(), environ: Dict[str, str] = None,
              **kwargs) -> ConfigurationRegistry:
        resolver = EnvironmentResolver(build_flags=build_flags, environ=environ or {})
        return ConfigurationRegistry(resolver=resolver, **kwargs)

    return _make


@pytest.fixture
def mock_preferences() -> MockPreferences:
    return MockPreferences()


@pytest.fixture
def json_preferences(temp_json_path: Path) -> JsonPreferences:
    return JsonPreferences(temp_json_path)
