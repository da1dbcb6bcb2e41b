"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from datetime import date
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from drillcore.core.catalog import CatalogItem, CourseCatalog  # noqa: E402
from drillcore.srs import ProgressStore, ReviewStore  # noqa: E402
from drillcore.storage import PersistedStore  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def today():
    """Fixed reference date so scheduling tests are deterministic."""
    return date(2024, 3, 15)


@pytest.fixture
def store():
    """Throwaway in-memory store."""
    s = PersistedStore.in_memory(namespace="test-course")
    yield s
    s.close()


@pytest.fixture
def reviews(store):
    return ReviewStore(store)


@pytest.fixture
def progress(store):
    return ProgressStore(store)


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def sample_catalog():
    """Provide a small course catalog for testing."""
    return CourseCatalog(
        module_names={1: "Basics", 2: "Control Flow"},
        concept_index={
            "m1_warmup_1": "Variables",
            "m1_warmup_2": "Variables",
            "m1_challenge_1": "Variables",
            "m2_warmup_1": "Loops",
            "m2_challenge_1": "Loops",
        },
        concept_links={"Variables": "variables", "Loops": "for-loops"},
        items=[
            CatalogItem(key="m1_warmup_1", difficulty=1),
            CatalogItem(key="m1_warmup_2", difficulty=1),
            CatalogItem(key="m1_challenge_1_v1", difficulty=2),
            CatalogItem(key="m1_challenge_1_v2", difficulty=2),
            CatalogItem(key="m2_warmup_1", difficulty=1),
            CatalogItem(key="m2_challenge_1_v1", difficulty=3),
        ],
    )
