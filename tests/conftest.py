"""Pytest configuration and fixtures."""

import sys
from collections.abc import Iterator
from pathlib import Path

# Add src and the test helpers to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import pytest
from fastapi.testclient import TestClient

from catalog.app import create_app
from catalog.books.store import RecordStore
from catalog.config import Settings
from fakes import FakeClock, InMemorySearchIndex


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Create test settings."""
    return Settings(
        host="127.0.0.1",
        port=4567,
        debug=True,
        database_path=str(tmp_path / "books.db"),
        index_alias="books",
    )


@pytest.fixture
def store(settings: Settings) -> RecordStore:
    """Record store on a fresh database with the table created."""
    record_store = RecordStore(settings.database_path)
    record_store.ensure_table()
    return record_store


@pytest.fixture
def search_index() -> InMemorySearchIndex:
    """Empty in-memory search engine."""
    return InMemorySearchIndex()


@pytest.fixture
def clock() -> FakeClock:
    """Clock for naming physical indices deterministically."""
    return FakeClock()


@pytest.fixture
def client(
    settings: Settings, store: RecordStore, search_index: InMemorySearchIndex
) -> Iterator[TestClient]:
    """Create test client with the lifespan running."""
    app = create_app(settings, record_store=store, search_index=search_index)
    with TestClient(app) as test_client:
        yield test_client
