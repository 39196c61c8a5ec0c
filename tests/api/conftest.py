"""Shared fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from facetbrowse.api.listing import get_source
from facetbrowse.catalog.source import InMemoryCatalogSource
from facetbrowse.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client over the generated demo catalog."""
    return TestClient(app)


@pytest.fixture
def fixed_client(catalog_source: InMemoryCatalogSource) -> TestClient:
    """Create test client over the small test catalog."""
    app.dependency_overrides[get_source] = lambda: catalog_source
    yield TestClient(app)
    app.dependency_overrides.clear()
