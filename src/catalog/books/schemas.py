"""Pydantic schemas for book records, requests and responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class NewBook(BaseModel):
    """Normalised field values for a book that has not been stored yet.

    Attributes:
        title: Trimmed, non-empty title.
        author: Trimmed, non-empty author.
        description: Trimmed description, None when blank.
        published_year: Year of publication, None when unknown.
    """

    title: str
    author: str
    description: str | None = None
    published_year: int | None = None


class BookRecord(NewBook):
    """Authoritative book row as held by the record store.

    Attributes:
        id: Store-assigned identifier, also the search document id.
        created_at: UTC timestamp set on insert.
        updated_at: UTC timestamp set on insert.
    """

    id: int
    created_at: datetime
    updated_at: datetime


class BookHit(BookRecord):
    """Hydrated search hit: the stored record plus its relevance score."""

    score: float


class BookCreateRequest(BaseModel):
    """Request body for adding a book.

    Missing, null and blank title or author all reach the same
    validation path in the writer. Scalar values are taken as text.
    """

    title: str | None = None
    author: str | None = None
    description: str | None = None
    published_year: int | None = Field(default=None, ge=0)

    @field_validator("title", "author", "description", mode="before")
    @classmethod
    def scalar_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class BookCreateResponse(BaseModel):
    """Response after storing and indexing a book."""

    result: str = "created"
    book: BookRecord


class BookSearchResponse(BaseModel):
    """Search response envelope.

    Attributes:
        query: The original search query string.
        results: Hydrated hits in descending relevance order.
    """

    query: str
    results: list[BookHit]


class ReindexResponse(BaseModel):
    """Response after a full reindex.

    Attributes:
        result: Always 'reindexed'.
        index: Name of the physical index the alias now points to.
    """

    result: str = "reindexed"
    index: str
