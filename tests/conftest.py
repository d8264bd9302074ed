"""Pytest configuration and shared fixtures."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from chorenest.main import app


@pytest.fixture
def test_client() -> Generator[TestClient]:
    """Provide FastAPI test client, dropping any dependency overrides afterwards."""
    yield TestClient(app)
    app.dependency_overrides.clear()
