"""Read path: relevance search against the alias, hydrated from the store."""

import structlog

from catalog.books.schemas import BookHit
from catalog.books.store import RecordStore
from catalog.search.index import SearchIndex, build_search_body

logger = structlog.get_logger()


class BookQuery:
    """Answers free-text queries with authoritative records."""

    def __init__(
        self,
        store: RecordStore,
        index: SearchIndex,
        alias: str,
        limit: int = 10,
    ) -> None:
        """Initialize query service.

        Args:
            store: Record store used for hydration.
            index: Search engine adapter.
            alias: Alias queries are sent to.
            limit: Maximum hits requested per search.
        """
        self._store = store
        self._index = index
        self._alias = alias
        self._limit = limit

    def search(self, query: str) -> list[BookHit]:
        """Search books and attach stored field values to each hit.

        Hits whose id is missing from the store are dropped, which covers
        an index that is ahead of or behind the table.

        Args:
            query: Raw user query. Blank queries return no results
                without calling the search engine.

        Returns:
            Hits in the engine's relevance order.

        Raises:
            SearchError: If the search call fails.
            StoreError: If hydration fails.
        """
        text = query.strip()
        if not text:
            return []

        hits = self._index.search(self._alias, build_search_body(text, self._limit))
        ids = list(dict.fromkeys(hit_id for hit_id, _ in hits))
        records = {record.id: record for record in self._store.find_by_ids(ids)}

        results: list[BookHit] = []
        for hit_id, score in hits:
            record = records.get(hit_id)
            if record is None:
                continue
            results.append(BookHit(score=score, **record.model_dump()))

        skipped = len(hits) - len(results)
        if skipped:
            logger.info("search_hits_unhydrated", query=text, skipped=skipped)
        return results
