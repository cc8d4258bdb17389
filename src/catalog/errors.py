"""Error kinds raised by the catalog core.

Adapters translate driver exceptions into these at the boundary, so routes
and services only ever deal with ``CatalogError`` subclasses.
"""


class CatalogError(Exception):
    """Base class for all catalog failures."""


class ValidationError(CatalogError):
    """A required field is missing or blank. Always caused by the client."""


class StoreError(CatalogError):
    """The record store is unreachable or a query failed."""


class IndexingError(CatalogError):
    """An index, bulk-write or alias operation on the search engine failed."""


class SearchError(CatalogError):
    """Executing a search query failed."""
