"""Write path: store a book, then index it under the same id."""

import structlog

from catalog.books.schemas import BookRecord, NewBook
from catalog.books.store import RecordStore
from catalog.errors import ValidationError
from catalog.search.index import SearchIndex, document_for

logger = structlog.get_logger()


def normalize(
    title: str | None,
    author: str | None,
    description: str | None = None,
    published_year: int | None = None,
) -> NewBook:
    """Trim and validate raw field values.

    Blank descriptions and a year of zero are treated as absent.

    Raises:
        ValidationError: If title or author is blank after trimming.
    """
    title = (title or "").strip()
    author = (author or "").strip()
    if not title or not author:
        raise ValidationError("title and author are required")

    return NewBook(
        title=title,
        author=author,
        description=(description or "").strip() or None,
        published_year=published_year or None,
    )


class BookWriter:
    """Adds books to the store and the search index."""

    def __init__(self, store: RecordStore, index: SearchIndex, alias: str) -> None:
        """Initialize writer.

        Args:
            store: Record store receiving the rows.
            index: Search engine adapter.
            alias: Alias documents are written through.
        """
        self._store = store
        self._index = index
        self._alias = alias

    def create(
        self,
        title: str | None,
        author: str | None,
        description: str | None = None,
        published_year: int | None = None,
    ) -> BookRecord:
        """Store a new book and index its document.

        If indexing fails the row stays in the store and the error is
        raised anyway; the next full reindex picks the row up.

        Args:
            title: Book title, required.
            author: Book author, required.
            description: Optional free text.
            published_year: Optional year of publication.

        Returns:
            The stored record.

        Raises:
            ValidationError: If title or author is blank.
            StoreError: If the insert fails.
            IndexingError: If the document cannot be indexed.
        """
        book = normalize(title, author, description, published_year)

        record = self._store.insert(book)
        logger.info("book_created", book_id=record.id)

        self._index.index_document(self._alias, record.id, document_for(record))
        logger.info("book_indexed", book_id=record.id, alias=self._alias)
        return record
