"""Book catalog endpoints: add and search."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request, status

from catalog.books.schemas import (
    BookCreateRequest,
    BookCreateResponse,
    BookSearchResponse,
)

if TYPE_CHECKING:
    from catalog.books.query import BookQuery
    from catalog.books.writer import BookWriter

router = APIRouter(prefix="/books", tags=["books"])


@router.post(
    "",
    response_model=BookCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"description": "Title or author missing"},
        500: {"description": "Store or index failure"},
    },
)
async def create_book(request: Request, body: BookCreateRequest) -> BookCreateResponse:
    """Store a book and index it for search.

    Args:
        request: FastAPI request (provides access to app state).
        body: Book fields. Title and author are required.

    Returns:
        The stored record with 201 Created.
    """
    writer: BookWriter = request.app.state.book_writer
    record = await asyncio.to_thread(
        writer.create,
        body.title,
        body.author,
        body.description,
        body.published_year,
    )
    return BookCreateResponse(book=record)


@router.get(
    "/search",
    response_model=BookSearchResponse,
    summary="Relevance-ranked search over title, author and description",
)
async def search_books(
    request: Request,
    q: str = Query(default="", max_length=200, description="Search query string"),
) -> BookSearchResponse:
    """Search books.

    Args:
        request: FastAPI request (provides access to app state).
        q: Free-text query. Blank returns no results.

    Returns:
        Hydrated hits in descending relevance order.
    """
    query: BookQuery = request.app.state.book_query
    results = await asyncio.to_thread(query.search, q)
    return BookSearchResponse(query=q, results=results)
