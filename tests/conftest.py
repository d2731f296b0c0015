# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for HOPS tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root and tests dir to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(Path(__file__).parent))

from route_fixtures import ScriptedHarness, build_route  # noqa: E402


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture
def make_route():
    return build_route


@pytest.fixture
def scripted() -> ScriptedHarness:
    return ScriptedHarness()
