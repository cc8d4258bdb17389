"""OpenSearch adapter tests with a mocked client."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from opensearchpy.exceptions import NotFoundError, OpenSearchException
from opensearchpy.helpers import BulkIndexError

from catalog.errors import IndexingError, SearchError
from catalog.search import BOOK_INDEX_TEMPLATE, OpenSearchIndex
from catalog.search import index as index_module


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def adapter(client: MagicMock) -> OpenSearchIndex:
    return OpenSearchIndex(client)


def test_alias_exists_delegates(adapter: OpenSearchIndex, client: MagicMock) -> None:
    """alias_exists asks the cluster by alias name."""
    client.indices.exists_alias.return_value = True

    assert adapter.alias_exists("books") is True
    client.indices.exists_alias.assert_called_once_with(name="books")


def test_create_index_sends_template(adapter: OpenSearchIndex, client: MagicMock) -> None:
    """The fixed mapping is sent as the create body."""
    adapter.create_index("books-1", BOOK_INDEX_TEMPLATE)

    client.indices.create.assert_called_once_with(index="books-1", body=BOOK_INDEX_TEMPLATE)


def test_create_index_failure_raises_indexing_error(
    adapter: OpenSearchIndex, client: MagicMock
) -> None:
    """Driver errors become IndexingError."""
    client.indices.create.side_effect = OpenSearchException("boom")

    with pytest.raises(IndexingError):
        adapter.create_index("books-1", BOOK_INDEX_TEMPLATE)


def test_get_indices_for_missing_alias_is_empty(
    adapter: OpenSearchIndex, client: MagicMock
) -> None:
    """A 404 on alias lookup means no indices."""
    client.indices.get_alias.side_effect = NotFoundError(404, "aliases_not_found_exception", {})

    assert adapter.get_indices_for_alias("books") == []


def test_get_indices_for_alias_lists_names(
    adapter: OpenSearchIndex, client: MagicMock
) -> None:
    """Index names are the keys of the alias response."""
    client.indices.get_alias.return_value = {
        "books-2": {"aliases": {"books": {}}},
        "books-1": {"aliases": {"books": {}}},
    }

    assert adapter.get_indices_for_alias("books") == ["books-1", "books-2"]


def test_update_aliases_is_single_request(
    adapter: OpenSearchIndex, client: MagicMock
) -> None:
    """Removes and the write-index add go out in one call."""
    adapter.update_aliases("books", remove=["books-1", "books-2"], add="books-3")

    client.indices.update_aliases.assert_called_once_with(
        body={
            "actions": [
                {"remove": {"index": "books-1", "alias": "books"}},
                {"remove": {"index": "books-2", "alias": "books"}},
                {"add": {"index": "books-3", "alias": "books", "is_write_index": True}},
            ]
        }
    )


def test_bulk_index_builds_actions(
    adapter: OpenSearchIndex, client: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Each document becomes one index action keyed by its id."""
    sent: list[Any] = []
    monkeypatch.setattr(
        index_module, "bulk", lambda c, actions: sent.append((c, actions)) or (2, [])
    )

    adapter.bulk_index("books-1", [(1, {"title": "A"}), (2, {"title": "B"})])

    assert sent == [
        (
            client,
            [
                {"_index": "books-1", "_id": "1", "_source": {"title": "A"}},
                {"_index": "books-1", "_id": "2", "_source": {"title": "B"}},
            ],
        )
    ]


def test_bulk_index_skips_empty_batch(
    adapter: OpenSearchIndex, monkeypatch: pytest.MonkeyPatch
) -> None:
    """No request is made for an empty batch."""
    bulk = MagicMock()
    monkeypatch.setattr(index_module, "bulk", bulk)

    adapter.bulk_index("books-1", [])

    bulk.assert_not_called()


def test_bulk_item_failure_raises_indexing_error(
    adapter: OpenSearchIndex, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Rejected bulk items surface as IndexingError."""

    def failing_bulk(client: Any, actions: Any) -> None:
        raise BulkIndexError("1 document(s) failed to index.", [{"index": {}}])

    monkeypatch.setattr(index_module, "bulk", failing_bulk)

    with pytest.raises(IndexingError):
        adapter.bulk_index("books-1", [(1, {"title": "A"})])


def test_delete_index_joins_names(adapter: OpenSearchIndex, client: MagicMock) -> None:
    """Several indices are deleted in one request."""
    adapter.delete_index(["books-1", "books-2"])

    client.indices.delete.assert_called_once_with(index="books-1,books-2")


def test_search_maps_hits(adapter: OpenSearchIndex, client: MagicMock) -> None:
    """Hit ids are parsed as ints and engine order is kept."""
    client.search.return_value = {
        "hits": {
            "hits": [
                {"_id": "7", "_score": 4.2},
                {"_id": "3", "_score": 1.1},
            ]
        }
    }

    assert adapter.search("books", {"query": {}}) == [(7, 4.2), (3, 1.1)]
    client.search.assert_called_once_with(index="books", body={"query": {}})


def test_search_skips_non_numeric_ids(adapter: OpenSearchIndex, client: MagicMock) -> None:
    """Documents not keyed by a record id are left out of the hits."""
    client.search.return_value = {
        "hits": {
            "hits": [
                {"_id": "legacy-abc", "_score": 9.0},
                {"_id": "4", "_score": 2.5},
            ]
        }
    }

    assert adapter.search("books", {"query": {}}) == [(4, 2.5)]


def test_search_failure_raises_search_error(
    adapter: OpenSearchIndex, client: MagicMock
) -> None:
    """Query execution failures become SearchError."""
    client.search.side_effect = OpenSearchException("unreachable")

    with pytest.raises(SearchError):
        adapter.search("books", {"query": {}})


def test_ping_reports_unreachable(adapter: OpenSearchIndex, client: MagicMock) -> None:
    """ping returns False instead of raising."""
    client.ping.side_effect = OpenSearchException("down")

    assert adapter.ping() is False
