"""Bulk import, undo and history routes for materials and events."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.dependencies import DbSession
from app.imports.batches import BatchService, get_event_batch_service, get_material_batch_service
from app.imports.exceptions import BatchNotFoundError, ImportInputError
from app.imports.payloads import read_import_request
from app.imports.schemas import ImportMode
from app.imports.service import get_event_import_service, get_material_import_service
from app.responses import api_response, error_response

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()


async def _undo(service: BatchService, batch_id: str) -> JSONResponse:
    try:
        return api_response(service.undo(batch_id))
    except BatchNotFoundError as e:
        return error_response(str(e), 404)
    except Exception as e:
        logger.exception("Undo of %s batch %s failed", service.entity_label, batch_id)
        return error_response("Failed to undo import", 500, message=str(e))


async def _history(service: BatchService) -> JSONResponse:
    try:
        return api_response(service.history())
    except Exception as e:
        logger.exception("Fetching %s import history failed", service.entity_label)
        return error_response("Failed to fetch import history", 500, message=str(e))


# --- Materials ---


@router.post("/materials/bulk")
async def bulk_import_materials(request: Request, db: DbSession):
    """Preview or commit a materials CSV.

    Preview classifies every row as valid, invalid or duplicate without
    writing. Commit inserts the valid rows under a new batch id.
    """
    try:
        payload = await read_import_request(request)
        service = get_material_import_service(
            db, payload.imported_by or settings.default_import_actor
        )
        if payload.mode == ImportMode.COMMIT:
            result = await service.commit(payload.csv_text)
        else:
            result = await service.preview(payload.csv_text)
        return api_response(result)
    except ImportInputError as e:
        return error_response(e.error, 400, **e.details)
    except Exception as e:
        logger.exception("Bulk materials import failed")
        return error_response("Bulk import failed", 500, message=str(e))


@router.delete("/materials/bulk/{batch_id}")
async def undo_materials_import(batch_id: str, db: DbSession):
    """Remove every material created by a recent import batch."""
    return await _undo(get_material_batch_service(db), batch_id)


@router.get("/materials/imports")
async def materials_import_history(db: DbSession):
    """List materials import batches from the recency window."""
    return await _history(get_material_batch_service(db))


# --- Events ---


@router.post("/events/bulk")
async def bulk_import_events(request: Request, db: DbSession):
    """Preview or commit an events CSV.

    Rows matching an existing event stay valid but are flagged
    ``isDuplicate``; on commit, ``duplicateAction`` (skip, replace,
    importAll) decides what happens to them.
    """
    try:
        payload = await read_import_request(request)
        service = get_event_import_service(
            db, payload.imported_by or settings.default_import_actor
        )
        if payload.mode == ImportMode.COMMIT:
            result = await service.commit(payload.csv_text, payload.duplicate_action)
        else:
            result = await service.preview(payload.csv_text)
        return api_response(result)
    except ImportInputError as e:
        return error_response(e.error, 400, **e.details)
    except Exception as e:
        logger.exception("Bulk events import failed")
        return error_response("Import failed", 500, message=str(e))


@router.delete("/events/bulk/{batch_id}")
async def undo_events_import(batch_id: str, db: DbSession):
    """Remove every event created or replaced by a recent import batch."""
    return await _undo(get_event_batch_service(db), batch_id)


@router.get("/events/imports")
async def events_import_history(db: DbSession):
    """List events import batches from the recency window."""
    return await _history(get_event_batch_service(db))
