"""FastAPI application factory for the mock API."""
from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from mockapi.core.config import Settings, get_settings
from mockapi.core.logging import bind_correlation_id, clear_context, configure_logging, get_logger
from mockapi.repositories import JsonFileStorage, MemoryStorage, StorageBackend
from mockapi.routers import records as records_router
from mockapi.services.collection_store import CollectionStore
from mockapi.services.record_service import RecordService

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a correlation id per request and log method, path, status and timing."""

    async def dispatch(self, request, call_next):
        correlation_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        bind_correlation_id(correlation_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers.setdefault("X-Request-ID", correlation_id)
            logger.info(
                "request_handled",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            clear_context()


def build_backend(settings: Settings) -> StorageBackend:
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "sql":
        from mockapi.repositories.sql_storage import SQLStorage

        return SQLStorage()
    return JsonFileStorage(Path(settings.data_dir))


def endpoint_urls(settings: Settings) -> list[str]:
    base = f"{settings.base_url}{settings.api_prefix}"
    return [f'{base}/{c.name} | item specific "{settings.api_prefix}/{c.name}/{{id}}"' for c in settings.collections]


def create_app(settings: Settings | None = None, backend: StorageBackend | None = None) -> FastAPI:
    """Factory compatible with uvicorn (``uvicorn --factory mockapi.app:create_app``)."""
    settings = settings or get_settings()
    configure_logging(settings)

    store = CollectionStore(backend if backend is not None else build_backend(settings))
    record_service = RecordService(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for collection in settings.collections:
            store.ensure(collection.name)
        logger.info("mock_api_ready", url=settings.base_url, storage=settings.storage_backend)
        for line in endpoint_urls(settings):
            logger.info("endpoint_available", endpoint=line)
        yield
        logger.info("mock_api_stopped")

    app = FastAPI(title="Mock API", lifespan=lifespan)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.collection_store = store
    app.state.record_service = record_service

    for collection in settings.collections:
        app.include_router(records_router.build_router(collection, prefix=settings.api_prefix))

    return app
