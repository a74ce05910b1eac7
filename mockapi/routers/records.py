from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Request, Response
from fastapi.responses import JSONResponse

from mockapi.core.config import CollectionConfig
from mockapi.core.logging import get_logger
from mockapi.services.record_service import RecordNotFound, RecordService

logger = get_logger(__name__)


def _get_record_service(request: Request) -> RecordService:
    svc = getattr(getattr(request.app, "state", None), "record_service", None)
    if not svc:
        raise RuntimeError("RecordService not configured")
    return svc


def _not_found() -> JSONResponse:
    return JSONResponse({"message": "Not found"}, status_code=404)


def _server_error(action: str, name: str) -> JSONResponse:
    logger.exception("record_operation_failed", collection=name, action=action)
    return JSONResponse({"message": f"Error {action} {name}"}, status_code=500)


def build_router(config: CollectionConfig, prefix: str = "/api") -> APIRouter:
    """Expose the enabled record operations of one collection."""
    name = config.name
    router = APIRouter(prefix=f"{prefix}/{name}", tags=[name])

    if config.enabled("list"):
        @router.get("")
        def list_records(request: Request):
            try:
                return _get_record_service(request).list_all(name)
            except Exception:
                return _server_error("reading", name)

    if config.enabled("get"):
        @router.get("/{record_id}")
        def get_record(record_id: str, request: Request):
            try:
                return _get_record_service(request).get_by_id(name, record_id)
            except RecordNotFound:
                return _not_found()
            except Exception:
                return _server_error("reading", name)

    if config.enabled("create"):
        @router.post("", status_code=201)
        def create_record(request: Request, payload: Optional[Dict[str, Any]] = Body(None)):
            try:
                return _get_record_service(request).create(name, payload or {})
            except Exception:
                return _server_error("creating", name)

    if config.enabled("update"):
        @router.put("/{record_id}")
        def update_record(record_id: str, request: Request, payload: Optional[Dict[str, Any]] = Body(None)):
            try:
                return _get_record_service(request).update(name, record_id, payload or {})
            except RecordNotFound:
                return _not_found()
            except Exception:
                return _server_error("updating", name)

    if config.enabled("delete"):
        @router.delete("/{record_id}", status_code=204)
        def delete_record(record_id: str, request: Request):
            try:
                _get_record_service(request).delete(name, record_id)
            except RecordNotFound:
                return _not_found()
            except Exception:
                return _server_error("deleting", name)
            return Response(status_code=204)

    return router
