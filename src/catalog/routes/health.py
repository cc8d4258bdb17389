"""Health check endpoints for liveness and readiness probes."""
import asyncio
from typing import Literal

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from catalog.books.store import RecordStore
from catalog.errors import CatalogError
from catalog.search.index import SearchIndex

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    """Liveness payload; only says the process answers HTTP."""

    status: Literal["alive"]


class ReadinessCheck(BaseModel):
    """Outcome of probing one backend.

    Attributes:
        name: "db", "search" or "alias:<name>".
        status: "ok" or "failed".
        message: Failure reason, None when the check passed.
    """

    name: str
    status: Literal["ok", "failed"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Readiness payload: ready only when every backend check passed."""

    status: Literal["ready", "not_ready"]
    checks: list[ReadinessCheck]


def _check_store(store: RecordStore) -> ReadinessCheck:
    try:
        store.ping()
    except CatalogError as e:
        return ReadinessCheck(name="db", status="failed", message=str(e))
    return ReadinessCheck(name="db", status="ok")


def _check_search(index: SearchIndex) -> ReadinessCheck:
    if index.ping():
        return ReadinessCheck(name="search", status="ok")
    return ReadinessCheck(name="search", status="failed", message="Cluster unreachable")


def _check_alias(index: SearchIndex, alias: str) -> ReadinessCheck:
    try:
        if index.alias_exists(alias):
            return ReadinessCheck(name=f"alias:{alias}", status="ok")
        message = "Alias not provisioned"
    except CatalogError as e:
        message = str(e)
    return ReadinessCheck(name=f"alias:{alias}", status="failed", message=message)


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe endpoint.

    Returns:
        Liveness status response.
    """
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Validates the record store, the search cluster and the index alias.
    Returns 200 if all checks pass, 503 if any fail.
    """
    state = request.app.state
    checks = [
        await asyncio.to_thread(_check_store, state.record_store),
        await asyncio.to_thread(_check_search, state.search_index),
        await asyncio.to_thread(
            _check_alias, state.search_index, state.settings.index_alias
        ),
    ]
    all_ok = all(c.status == "ok" for c in checks)
    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        checks=checks,
    )
    code = status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=code)
