"""FastAPI application factory and lifespan management."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog.books.query import BookQuery
from catalog.books.store import RecordStore
from catalog.books.writer import BookWriter
from catalog.config import Settings
from catalog.errors import CatalogError, ValidationError
from catalog.middleware.auth import AdminKeyMiddleware
from catalog.middleware.logging import RequestLoggingMiddleware
from catalog.routes import admin, books, health
from catalog.search import IndexSynchronizer, OpenSearchIndex, SearchIndex

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Provision storage and wire the catalog services.

    The book table and the index alias are created here, once, before
    the first request is served. Both steps are idempotent, so running
    several workers against the same backends is safe.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    store: RecordStore = app.state.record_store
    index: SearchIndex = app.state.search_index
    logger.info("catalog_startup", host=settings.host, port=settings.port)

    synchronizer = IndexSynchronizer(
        store,
        index,
        alias=settings.index_alias,
        batch_size=settings.reindex_batch_size,
    )

    await asyncio.to_thread(store.ensure_table)
    await asyncio.to_thread(synchronizer.ensure_index)
    logger.info("catalog_ready", alias=settings.index_alias)

    app.state.synchronizer = synchronizer
    app.state.book_writer = BookWriter(store, index, settings.index_alias)
    app.state.book_query = BookQuery(
        store, index, settings.index_alias, limit=settings.search_limit
    )

    yield

    logger.info("catalog_shutdown")


async def _handle_catalog_error(request: Request, exc: Exception) -> JSONResponse:
    """Render catalog failures as ``{"error": message}``."""
    if isinstance(exc, ValidationError):
        return JSONResponse(status_code=422, content={"error": str(exc)})

    logger.error(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(
    settings: Settings | None = None,
    record_store: RecordStore | None = None,
    search_index: SearchIndex | None = None,
) -> FastAPI:
    """Factory function to create configured FastAPI application.

    Args:
        settings: Configuration instance. Creates default if None.
        record_store: Book store. Built from settings if None.
        search_index: Search engine adapter. Built from settings if None.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings()
    if record_store is None:
        record_store = RecordStore(
            settings.database_path, timeout=settings.database_timeout
        )
    if search_index is None:
        search_index = OpenSearchIndex.from_url(
            settings.opensearch_url,
            username=settings.opensearch_username,
            password=settings.opensearch_password,
            verify_certs=settings.opensearch_verify_certs,
            timeout=settings.opensearch_timeout,
        )

    app = FastAPI(
        title="Book Catalog API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/v1/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/v1/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.record_store = record_store
    app.state.search_index = search_index

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )
    app.add_middleware(RequestLoggingMiddleware)
    if settings.key:
        app.add_middleware(AdminKeyMiddleware, api_key=settings.key)

    app.add_exception_handler(CatalogError, _handle_catalog_error)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(books.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
