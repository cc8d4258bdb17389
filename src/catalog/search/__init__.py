"""Full-text search over books, addressed through an index alias."""

from catalog.search.index import (
    BOOK_INDEX_TEMPLATE,
    OpenSearchIndex,
    SearchIndex,
    build_search_body,
    document_for,
)
from catalog.search.synchronizer import IndexSynchronizer

__all__ = [
    "BOOK_INDEX_TEMPLATE",
    "IndexSynchronizer",
    "OpenSearchIndex",
    "SearchIndex",
    "build_search_body",
    "document_for",
]
