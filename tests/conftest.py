import os

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")
os.environ.setdefault("CORS_ALLOW_ORIGINS", "http://localhost:3000")

from src.api.main import app  # noqa: E402
from src.api.repositories import InMemoryRepository, get_repository  # noqa: E402


@pytest.fixture(name="repo")
def repo_fixture():
    """A fresh, empty in-memory store for each test."""
    return InMemoryRepository()


@pytest.fixture(name="client")
def client_fixture(repo: InMemoryRepository):
    """Test client whose requests all share the per-test store."""
    app.dependency_overrides[get_repository] = lambda: repo
    # Unhandled errors are asserted as 500 responses instead of re-raised
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    app.dependency_overrides.clear()
