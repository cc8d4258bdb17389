"""Alias-based provisioning and zero-downtime reindexing of book documents."""

import threading
import time
from collections.abc import Callable

import structlog

from catalog.books.store import RecordStore
from catalog.errors import IndexingError
from catalog.search.index import BOOK_INDEX_TEMPLATE, SearchIndex, document_for

logger = structlog.get_logger()

DEFAULT_BATCH_SIZE = 1000


class IndexSynchronizer:
    """Keeps the physical index behind an alias consistent with the store.

    Readers and writers only ever address the alias. A reindex builds a
    fresh timestamped physical index, fills it from the store, then swaps
    the alias over in one request and drops the indices it replaced.
    """

    def __init__(
        self,
        store: RecordStore,
        index: SearchIndex,
        alias: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize synchronizer.

        Args:
            store: Record store providing the authoritative rows.
            index: Search engine adapter.
            alias: Logical alias name.
            batch_size: Rows per keyset page and bulk request.
            clock: Source of unix time used to name physical indices.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self._store = store
        self._index = index
        self._alias = alias
        self._batch_size = batch_size
        self._clock = clock
        self._provision_lock = threading.Lock()

    @property
    def alias(self) -> str:
        return self._alias

    def physical_name(self) -> str:
        """Name for a new physical index, ``<alias>-<unix-timestamp>``.

        When an index with that name already exists (two runs within the
        same second) the timestamp is advanced to the next free one.
        """
        timestamp = int(self._clock())
        while self._index.index_exists(f"{self._alias}-{timestamp}"):
            timestamp += 1
        return f"{self._alias}-{timestamp}"

    def ensure_index(self) -> str | None:
        """Bind the alias to a fresh empty index unless it already exists.

        A physical index sitting at the alias's literal name (left over
        from before aliases were used) is deleted so the name can be used
        as an alias.

        Returns:
            Name of the created physical index, or None if the alias
            was already provisioned.
        """
        with self._provision_lock:
            if self._index.alias_exists(self._alias):
                logger.debug("search_alias_present", alias=self._alias)
                return None

            new_index = self.physical_name()
            self._index.create_index(new_index, BOOK_INDEX_TEMPLATE)

            if self._index.index_exists(self._alias):
                self._index.delete_index(self._alias)
                logger.info("legacy_index_deleted", index=self._alias)

            self._index.update_aliases(self._alias, remove=[], add=new_index)

        logger.info("search_alias_provisioned", alias=self._alias, index=new_index)
        return new_index

    def reindex(self) -> str:
        """Rebuild the alias's index from every stored record.

        A failure at any step propagates without cleanup. The partly
        built index is left unaliased and a later run ignores it.

        Returns:
            Name of the physical index the alias now points to.
        """
        new_index = self.physical_name()
        logger.info("reindex_started", alias=self._alias, index=new_index)

        self._index.create_index(new_index, BOOK_INDEX_TEMPLATE)

        last_id = 0
        pages = 0
        total = 0
        while True:
            batch = self._store.scan_page(last_id, self._batch_size)
            if not batch:
                break

            self._index.bulk_index(
                new_index, [(record.id, document_for(record)) for record in batch]
            )
            last_id = batch[-1].id
            pages += 1
            total += len(batch)
            logger.debug(
                "reindex_page_indexed",
                index=new_index,
                page=pages,
                size=len(batch),
                last_id=last_id,
            )
            if len(batch) < self._batch_size:
                break

        self._index.refresh(new_index)

        try:
            current = self._index.get_indices_for_alias(self._alias)
        except IndexingError as e:
            logger.warning("search_alias_lookup_failed", alias=self._alias, error=str(e))
            current = []

        self._index.update_aliases(self._alias, remove=current, add=new_index)

        obsolete = [name for name in current if name != new_index]
        if obsolete:
            self._index.delete_index(obsolete)

        logger.info(
            "reindex_completed",
            alias=self._alias,
            index=new_index,
            documents=total,
            pages=pages,
            retired=obsolete,
        )
        return new_index
