"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from books_api.config import APIConfig
from books_api.database import BookStore
from books_api.main import create_app
from books_api.models import BookInput


@pytest.fixture
def api_settings(tmp_path):
    """Create API settings pointing at a temporary database."""
    return APIConfig(
        database_path=str(tmp_path / "books.db"),
        log_level="WARNING",
        log_format="console",
    )


@pytest.fixture
async def book_store(tmp_path):
    """Create a connected storage handle with the books table in place."""
    store = BookStore(str(tmp_path / "store.db"))
    await store.connect()
    await store.ensure_schema()
    yield store
    await store.disconnect()


@pytest.fixture
def client(api_settings):
    """Create test client; entering it runs the application lifespan."""
    app = create_app(settings=api_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_book_data():
    """Create sample book data for testing."""
    return {"title": "Dune", "author": "Herbert", "year": 1965}


@pytest.fixture
def sample_book_input(sample_book_data):
    return BookInput(**sample_book_data)
