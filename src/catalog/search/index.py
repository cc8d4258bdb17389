"""Search index port and its OpenSearch implementation."""

from collections.abc import Sequence
from typing import Any, Protocol

import structlog
from opensearchpy import OpenSearch
from opensearchpy.exceptions import NotFoundError, OpenSearchException
from opensearchpy.helpers import BulkIndexError, bulk

from catalog.books.schemas import BookRecord
from catalog.errors import IndexingError, SearchError

logger = structlog.get_logger()

BOOK_INDEX_TEMPLATE: dict[str, Any] = {
    "mappings": {
        "properties": {
            "title": {"type": "text"},
            "author": {"type": "text"},
            "description": {"type": "text"},
            "published_year": {"type": "integer"},
        }
    }
}

SEARCH_FIELDS: tuple[str, ...] = ("title^3", "author", "description")


def document_for(record: BookRecord) -> dict[str, Any]:
    """Project a record onto its search document.

    Empty descriptions and absent or zero years are left out.

    Args:
        record: Stored book record.

    Returns:
        Document body keyed by field name.
    """
    document: dict[str, Any] = {"title": record.title, "author": record.author}
    if record.description:
        document["description"] = record.description
    if record.published_year:
        document["published_year"] = record.published_year
    return document


def build_search_body(query: str, size: int = 10) -> dict[str, Any]:
    """Build a multi-field relevance query, title boosted over the rest."""
    return {
        "size": size,
        "query": {
            "multi_match": {
                "query": query,
                "fields": list(SEARCH_FIELDS),
            }
        },
    }


class SearchIndex(Protocol):
    """Operations the catalog needs from a search engine."""

    def index_exists(self, name: str) -> bool: ...

    def alias_exists(self, name: str) -> bool: ...

    def create_index(self, name: str, template: dict[str, Any]) -> None: ...

    def bulk_index(
        self, index: str, documents: Sequence[tuple[int, dict[str, Any]]]
    ) -> None: ...

    def index_document(self, index: str, doc_id: int, document: dict[str, Any]) -> None: ...

    def refresh(self, index: str) -> None: ...

    def get_indices_for_alias(self, alias: str) -> list[str]: ...

    def update_aliases(self, alias: str, remove: Sequence[str], add: str) -> None: ...

    def delete_index(self, names: str | Sequence[str]) -> None: ...

    def search(self, index: str, body: dict[str, Any]) -> list[tuple[int, float]]: ...

    def ping(self) -> bool: ...


class OpenSearchIndex:
    """SearchIndex backed by an OpenSearch cluster.

    Driver exceptions are re-raised as IndexingError, or SearchError for
    query execution.
    """

    def __init__(self, client: OpenSearch) -> None:
        """Initialize with a configured client.

        Args:
            client: opensearch-py client instance.
        """
        self._client = client

    @classmethod
    def from_url(
        cls,
        url: str,
        username: str = "",
        password: str = "",
        verify_certs: bool = True,
        timeout: float = 10.0,
    ) -> "OpenSearchIndex":
        """Build an index adapter connected to a single cluster endpoint."""
        client = OpenSearch(
            hosts=[url],
            http_auth=(username, password) if username else None,
            verify_certs=verify_certs,
            timeout=timeout,
        )
        return cls(client)

    def index_exists(self, name: str) -> bool:
        try:
            return bool(self._client.indices.exists(index=name))
        except OpenSearchException as e:
            raise IndexingError(f"index lookup failed for {name}: {e}") from e

    def alias_exists(self, name: str) -> bool:
        try:
            return bool(self._client.indices.exists_alias(name=name))
        except OpenSearchException as e:
            raise IndexingError(f"alias lookup failed for {name}: {e}") from e

    def create_index(self, name: str, template: dict[str, Any]) -> None:
        try:
            self._client.indices.create(index=name, body=template)
        except OpenSearchException as e:
            raise IndexingError(f"cannot create index {name}: {e}") from e
        logger.info("search_index_created", index=name)

    def bulk_index(
        self, index: str, documents: Sequence[tuple[int, dict[str, Any]]]
    ) -> None:
        """Write many documents in one bulk request.

        Args:
            index: Physical index name.
            documents: ``(id, document)`` pairs.

        Raises:
            IndexingError: If the request fails or any item is rejected.
        """
        if not documents:
            return

        actions = [
            {"_index": index, "_id": str(doc_id), "_source": document}
            for doc_id, document in documents
        ]
        try:
            bulk(self._client, actions)
        except (BulkIndexError, OpenSearchException) as e:
            raise IndexingError(f"bulk write to {index} failed: {e}") from e

    def index_document(self, index: str, doc_id: int, document: dict[str, Any]) -> None:
        try:
            self._client.index(index=index, id=str(doc_id), body=document)
        except OpenSearchException as e:
            raise IndexingError(f"cannot index document {doc_id}: {e}") from e

    def refresh(self, index: str) -> None:
        try:
            self._client.indices.refresh(index=index)
        except OpenSearchException as e:
            raise IndexingError(f"cannot refresh {index}: {e}") from e

    def get_indices_for_alias(self, alias: str) -> list[str]:
        """List the physical indices an alias is bound to.

        Returns:
            Index names, empty when the alias does not exist.
        """
        try:
            response = self._client.indices.get_alias(name=alias)
        except NotFoundError:
            return []
        except OpenSearchException as e:
            raise IndexingError(f"alias lookup failed for {alias}: {e}") from e
        return sorted(response.keys())

    def update_aliases(self, alias: str, remove: Sequence[str], add: str) -> None:
        """Move ``alias`` from ``remove`` to ``add`` in a single request.

        The added binding is marked as the write index.
        """
        actions: list[dict[str, Any]] = [
            {"remove": {"index": name, "alias": alias}} for name in remove
        ]
        actions.append({"add": {"index": add, "alias": alias, "is_write_index": True}})
        try:
            self._client.indices.update_aliases(body={"actions": actions})
        except OpenSearchException as e:
            raise IndexingError(f"alias update for {alias} failed: {e}") from e

    def delete_index(self, names: str | Sequence[str]) -> None:
        targets = [names] if isinstance(names, str) else list(names)
        if not targets:
            return
        try:
            self._client.indices.delete(index=",".join(targets))
        except OpenSearchException as e:
            raise IndexingError(f"cannot delete {targets}: {e}") from e
        logger.info("search_index_deleted", indices=targets)

    def search(self, index: str, body: dict[str, Any]) -> list[tuple[int, float]]:
        """Run a query and return ``(id, score)`` pairs in engine order.

        Hits whose id is not an integer cannot belong to a book record
        and are skipped.
        """
        try:
            response = self._client.search(index=index, body=body)
        except OpenSearchException as e:
            raise SearchError(f"search on {index} failed: {e}") from e

        results: list[tuple[int, float]] = []
        for hit in response.get("hits", {}).get("hits", []):
            try:
                doc_id = int(hit["_id"])
            except ValueError:
                logger.warning("search_hit_id_invalid", index=index, doc_id=hit["_id"])
                continue
            results.append((doc_id, float(hit.get("_score") or 0.0)))
        return results

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except OpenSearchException:
            return False
