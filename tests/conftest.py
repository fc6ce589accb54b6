# tests/conftest.py
"""
Pytest configuration and fixtures.
"""

import os

import pytest

# Set test environment before any viibe module reads settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("HISTORY_STORE_PROVIDER", "memory")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("LOG_JSON", "false")

from viibe.services.duplicate_detector import DuplicateDetector  # noqa: E402
from viibe.storage.factory import reset_history_store  # noqa: E402
from viibe.storage.memory_provider import InMemoryKeyValueStore  # noqa: E402


@pytest.fixture
def memory_store():
    """Fresh in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def detector(memory_store):
    """Duplicate detector backed by an in-memory store."""
    return DuplicateDetector(store=memory_store)


@pytest.fixture
def client(detector):
    """Test client whose history endpoints use the in-memory detector."""
    from fastapi.testclient import TestClient

    from viibe.main import app
    from viibe.routers.history import get_detector
    from viibe.routers.tags import invalidate_validate_cache

    app.dependency_overrides[get_detector] = lambda: detector
    invalidate_validate_cache()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Keep process-wide singletons from leaking between tests."""
    yield
    reset_history_store()
