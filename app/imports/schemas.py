"""Pydantic schemas for bulk import, undo and history."""

import enum
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ImportMode(str, enum.Enum):
    """Bulk import execution mode."""

    PREVIEW = "preview"  # classify only, no writes
    COMMIT = "commit"  # persist rows and write one batch record


class DuplicateAction(str, enum.Enum):
    """What an events commit does with rows matching an existing event."""

    SKIP = "skip"
    REPLACE = "replace"
    IMPORT_ALL = "importAll"


class CamelModel(BaseModel):
    """Base for response envelopes serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Row-level report entries ---


class ExistingRecord(CamelModel):
    """Identifying fields of a persisted entity matched by natural key."""

    id: int
    title: str
    date: str


class ValidRow(CamelModel):
    row: int
    data: dict[str, Any]
    is_duplicate: bool = False


class RowError(CamelModel):
    """Validation failure for one row."""

    row: int
    data: dict[str, Any]
    errors: list[str]


class InsertFailure(CamelModel):
    """Persistence failure for one row during commit."""

    row: int
    data: dict[str, Any]
    error: str


class DuplicateRow(CamelModel):
    row: int
    data: dict[str, Any]
    existing: ExistingRecord
    existing_id: int


# --- Materials ---


class MaterialImportSummary(CamelModel):
    total: int
    valid: int
    errors: int
    duplicates: int


class MaterialCommitSummary(CamelModel):
    total: int
    imported: int
    errors: int
    duplicates: int


class MaterialImportPreview(CamelModel):
    mode: ImportMode = ImportMode.PREVIEW
    summary: MaterialImportSummary
    valid: list[ValidRow]
    errors: list[RowError]
    duplicates: list[DuplicateRow]


class MaterialImportCommit(CamelModel):
    """Commit report. ``batch_id`` is None when nothing was importable."""

    mode: ImportMode = ImportMode.COMMIT
    batch_id: Optional[str] = None
    message: str
    summary: Union[MaterialCommitSummary, MaterialImportSummary]
    imported: int = 0
    errors: list[Union[RowError, InsertFailure]]
    duplicates: list[DuplicateRow]


# --- Events ---


class EventImportSummary(CamelModel):
    total: int
    valid: int
    invalid: int
    duplicates: int


class EventCommitSummary(EventImportSummary):
    inserted: int


class EventImportPreview(CamelModel):
    mode: ImportMode = ImportMode.PREVIEW
    summary: EventImportSummary
    valid: list[ValidRow]
    invalid: list[RowError]
    duplicates: list[DuplicateRow]
    sample_valid: list[ValidRow]
    headers: list[str]


class EventImportCommit(CamelModel):
    success: bool = True
    mode: ImportMode = ImportMode.COMMIT
    imported: int
    batch_id: str
    duplicate_action: DuplicateAction
    summary: EventCommitSummary
    errors: list[InsertFailure] = Field(default_factory=list)


# --- Batches ---


class BatchResponse(BaseModel):
    """A persisted import batch, keyed by its column names."""

    id: str
    imported_at: datetime
    imported_by: Optional[str] = None
    total_count: int
    success_count: int
    error_count: int
    duplicate_count: int
    status: str
    summary: Optional[dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True)


class ImportHistory(CamelModel):
    imports: list[BatchResponse]
    count: int


class UndoneBatch(CamelModel):
    id: str
    imported_at: datetime
    total_count: int


class UndoResult(CamelModel):
    success: bool = True
    message: str
    deleted_count: int
    batch: UndoneBatch
