"""Record store tests against a temporary SQLite database."""

import sqlite3
from datetime import UTC
from pathlib import Path

import pytest

from catalog.books.schemas import NewBook
from catalog.books.store import RecordStore
from catalog.errors import StoreError
from fakes import add_books


def test_ensure_table_creates_missing_table(tmp_path: Path) -> None:
    """ensure_table creates the book table on a fresh database."""
    store = RecordStore(tmp_path / "fresh.db")
    assert store.table_exists() is False

    store.ensure_table()
    store.ensure_table()

    assert store.table_exists() is True


def test_insert_assigns_id_and_timestamps(store: RecordStore) -> None:
    """Insert returns the stored row with id and matching UTC timestamps."""
    record = store.insert(NewBook(title="Dune", author="Herbert"))

    assert record.id == 1
    assert record.title == "Dune"
    assert record.description is None
    assert record.published_year is None
    assert record.created_at == record.updated_at
    assert record.created_at.tzinfo is UTC


def test_insert_ids_increase(store: RecordStore) -> None:
    """Each insert gets the next id."""
    assert add_books(store, 3) == [1, 2, 3]


def test_find_by_ids_ignores_unknown(store: RecordStore) -> None:
    """Unknown ids are skipped rather than raising."""
    add_books(store, 3)

    records = store.find_by_ids([3, 1, 42])

    assert sorted(r.id for r in records) == [1, 3]


def test_find_by_ids_round_trips_fields(store: RecordStore) -> None:
    """Stored optional fields come back unchanged."""
    created = store.insert(
        NewBook(
            title="Foundation",
            author="Asimov",
            description="Psychohistory",
            published_year=1951,
        )
    )

    [found] = store.find_by_ids([created.id])

    assert found == created


def test_find_by_ids_empty_input(tmp_path: Path) -> None:
    """An empty id list returns nothing without touching the database."""
    store = RecordStore(tmp_path / "missing-table.db")

    assert store.find_by_ids([]) == []


def test_scan_page_uses_keyset(store: RecordStore) -> None:
    """scan_page returns rows strictly after the cursor, ascending."""
    add_books(store, 5)

    first = store.scan_page(0, 2)
    second = store.scan_page(first[-1].id, 2)
    third = store.scan_page(second[-1].id, 2)
    done = store.scan_page(third[-1].id, 2)

    assert [r.id for r in first] == [1, 2]
    assert [r.id for r in second] == [3, 4]
    assert [r.id for r in third] == [5]
    assert done == []


def test_scan_page_skips_deleted_ids(store: RecordStore, tmp_path: Path) -> None:
    """Gaps in the id sequence do not shorten pages."""
    add_books(store, 4)
    conn = sqlite3.connect(tmp_path / "books.db")
    with conn:
        conn.execute("DELETE FROM books WHERE id = 2")
    conn.close()

    assert [r.id for r in store.scan_page(0, 3)] == [1, 3, 4]


def test_missing_table_raises_store_error(tmp_path: Path) -> None:
    """Queries against a database without the table raise StoreError."""
    store = RecordStore(tmp_path / "empty.db")

    with pytest.raises(StoreError):
        store.insert(NewBook(title="Dune", author="Herbert"))


def test_unopenable_database_raises_store_error(tmp_path: Path) -> None:
    """A path that cannot be opened as a database raises StoreError."""
    store = RecordStore(tmp_path)

    with pytest.raises(StoreError):
        store.ping()
