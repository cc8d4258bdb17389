"""Administrative endpoints."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from catalog.books.schemas import ReindexResponse
from catalog.errors import CatalogError

if TYPE_CHECKING:
    from catalog.search.synchronizer import IndexSynchronizer

logger = structlog.get_logger()

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/reindex",
    response_model=ReindexResponse,
    responses={500: {"description": "Reindex failed"}},
)
async def reindex(request: Request) -> ReindexResponse | JSONResponse:
    """Rebuild the search index from the record store and swap the alias.

    Returns:
        Name of the new physical index, or 500 with the failure reason.
    """
    synchronizer: IndexSynchronizer = request.app.state.synchronizer
    try:
        new_index = await asyncio.to_thread(synchronizer.reindex)
    except CatalogError as e:
        logger.error("reindex_failed", alias=synchronizer.alias, error=str(e))
        return JSONResponse(
            status_code=500,
            content={"error": f"reindex failed: {e}"},
        )
    return ReindexResponse(index=new_index)
