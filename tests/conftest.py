"""
Shared pytest configuration and fixtures for the ranked-choice tabulator.

This module provides common test fixtures and utilities used across
all test modules.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tabulation.engine import create_engine  # noqa: E402


@pytest.fixture
def engine():
    """Provide an engine with the built-in methods registered."""
    return create_engine()


@pytest.fixture
def sample_candidates():
    """Provide sample candidate names for testing."""
    return ["Alice", "Bob", "Charlie", "Diana"]


@pytest.fixture
def sample_ballots():
    """Provide sample ballots for testing."""
    return [
        # Alice=1, Bob=2, Charlie=3
        ["Alice", "Bob", "Charlie"],
        # Bob=1, Alice=2
        ["Bob", "Alice"],
        # Charlie=1, Diana=2, Alice=3
        ["Charlie", "Diana", "Alice"],
        ["Alice", "Charlie"],
        ["Diana"],
    ]


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (engine, web and scripts together)",
    )
    config.addinivalue_line(
        "markers",
        "golden: marks tests as golden dataset validation (hand-computed results)",
    )
    config.addinivalue_line(
        "markers", "invariant: marks tests as mathematical invariant validation"
    )
    config.addinivalue_line(
        "markers", "smoke: marks tests as smoke tests (basic functionality check)"
    )
