"""Imports module for CSV bulk import, undo and history."""

from app.imports.batches import BatchService, get_event_batch_service, get_material_batch_service
from app.imports.duplicates import (
    DuplicateResolver,
    EventDuplicateResolver,
    MaterialDuplicateResolver,
)
from app.imports.exceptions import BatchNotFoundError, ImportInputError
from app.imports.parsers import (
    EVENT_REQUIRED_HEADERS,
    MATERIAL_REQUIRED_HEADERS,
    ParsedCSV,
    parse_csv,
)
from app.imports.router import router
from app.imports.schemas import DuplicateAction, ImportMode
from app.imports.service import (
    EventImportService,
    MaterialImportService,
    get_event_import_service,
    get_material_import_service,
)
from app.imports.validators import validate_event_row, validate_material_row

__all__ = [
    "router",
    "parse_csv",
    "ParsedCSV",
    "MATERIAL_REQUIRED_HEADERS",
    "EVENT_REQUIRED_HEADERS",
    "validate_material_row",
    "validate_event_row",
    # Duplicate policies
    "DuplicateResolver",
    "MaterialDuplicateResolver",
    "EventDuplicateResolver",
    # Orchestration
    "ImportMode",
    "DuplicateAction",
    "MaterialImportService",
    "EventImportService",
    "get_material_import_service",
    "get_event_import_service",
    # Undo / history
    "BatchService",
    "get_material_batch_service",
    "get_event_batch_service",
    "ImportInputError",
    "BatchNotFoundError",
]
