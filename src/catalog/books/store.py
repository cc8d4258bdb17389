"""SQLite-backed record store for books."""

import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

import structlog

from catalog.books.schemas import BookRecord, NewBook
from catalog.errors import StoreError

logger = structlog.get_logger()

TABLE_NAME = "books"

_COLUMNS = "id, title, author, description, published_year, created_at, updated_at"


def _row_to_record(row: sqlite3.Row) -> BookRecord:
    return BookRecord(
        id=row["id"],
        title=row["title"],
        author=row["author"],
        description=row["description"],
        published_year=row["published_year"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class RecordStore:
    """Authoritative book table.

    Each operation opens its own short-lived connection, so a single
    instance can be shared by every worker thread of the server.
    """

    def __init__(self, path: str | Path, timeout: float = 5.0) -> None:
        """Initialize store.

        Args:
            path: SQLite database file. Created on first connection.
            timeout: Seconds to wait when the database is locked.
        """
        self._path = str(path)
        self._timeout = timeout

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and translate driver errors.

        Yields:
            Connection with ``sqlite3.Row`` row factory.

        Raises:
            StoreError: If connecting or any statement fails.
        """
        try:
            conn = sqlite3.connect(self._path, timeout=self._timeout)
        except sqlite3.Error as e:
            raise StoreError(f"cannot open database {self._path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def table_exists(self) -> bool:
        """Check whether the book table has been created."""
        with self._connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
                (TABLE_NAME,),
            ).fetchone()
        return row is not None

    def create_table(self) -> None:
        """Create the book table. Safe to call when it already exists."""
        with self._connection() as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    author TEXT NOT NULL,
                    description TEXT,
                    published_year INTEGER,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """)

    def ensure_table(self) -> None:
        """Create the book table if absent."""
        if self.table_exists():
            return
        self.create_table()
        logger.info("book_table_created", path=self._path)

    def insert(self, book: NewBook) -> BookRecord:
        """Insert a book and return the stored row.

        Args:
            book: Normalised field values.

        Returns:
            The stored record, including its assigned id and timestamps.
        """
        now = datetime.now(UTC)
        with self._connection() as conn:
            cursor = conn.execute(
                f"""
                INSERT INTO {TABLE_NAME}
                    (title, author, description, published_year, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    book.title,
                    book.author,
                    book.description,
                    book.published_year,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            book_id = cursor.lastrowid

        assert book_id is not None
        return BookRecord(
            id=book_id,
            created_at=now,
            updated_at=now,
            **book.model_dump(),
        )

    def find_by_ids(self, ids: Sequence[int]) -> list[BookRecord]:
        """Fetch every record whose id is in ``ids``, in no particular order.

        Args:
            ids: Record identifiers. Unknown ids are ignored.

        Returns:
            Matching records.
        """
        if not ids:
            return []

        placeholders = ", ".join("?" for _ in ids)
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM {TABLE_NAME} WHERE id IN ({placeholders})",
                tuple(ids),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def scan_page(self, min_id_exclusive: int, limit: int) -> list[BookRecord]:
        """Fetch the next keyset page of records in ascending id order.

        Args:
            min_id_exclusive: Last id seen by the caller (0 to start).
            limit: Maximum rows to return.

        Returns:
            Up to ``limit`` records with ``id > min_id_exclusive``.
        """
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM {TABLE_NAME} WHERE id > ? ORDER BY id LIMIT ?",
                (min_id_exclusive, limit),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def ping(self) -> None:
        """Run a trivial query, raising StoreError if the database is unusable."""
        with self._connection() as conn:
            conn.execute("SELECT 1")
