"""Shared pytest fixtures for shouldmatch tests."""

from pathlib import Path

import pytest

from fixture_models import Issue
from shouldmatch.config import reset_settings


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def issue() -> Issue:
    """Return a fresh Issue."""
    return Issue()


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default matcher settings."""
    monkeypatch.delenv("SHOULDMATCH_CONFIG", raising=False)
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def suite_dir() -> Path:
    """Return the directory holding the example suite files."""
    return Path(__file__).parent / "suites"
