"""Bulk import orchestration for materials and events.

Both importers share one pipeline: parse → validate → resolve duplicates.
``preview`` returns the classification without touching the store;
``commit`` applies it row by row and writes one batch record.

Commits are best effort. The batch record is written before the first row
so every tagged row always has an owner. Each row is committed on its own
and a failing row is rolled back and reported. Undoing the batch is the
recovery path.
"""

import logging
import secrets
import string
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db.models import BatchStatus, Event, EventImportBatch, Material, MaterialImportBatch
from app.imports.duplicates import (
    DuplicateResolver,
    EventDuplicateResolver,
    MaterialDuplicateResolver,
)
from app.imports.exceptions import ImportInputError
from app.imports.parsers import (
    EVENT_REQUIRED_HEADERS,
    MATERIAL_REQUIRED_HEADERS,
    missing_headers,
    parse_csv,
    row_number,
)
from app.imports.report import DuplicateVerdict, ImportReport
from app.imports.schemas import (
    DuplicateAction,
    EventCommitSummary,
    EventImportCommit,
    EventImportPreview,
    EventImportSummary,
    InsertFailure,
    MaterialCommitSummary,
    MaterialImportCommit,
    MaterialImportPreview,
    MaterialImportSummary,
    RowError,
)
from app.imports.validators import (
    RowValidation,
    ValidatedRecord,
    validate_event_row,
    validate_material_row,
)

logger = logging.getLogger(__name__)
settings = get_settings()

_BATCH_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def new_material_batch_id() -> str:
    """Return ``import_<epoch millis>_<9 random chars>``."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BATCH_SUFFIX_ALPHABET) for _ in range(9))
    return f"import_{millis}_{suffix}"


def new_event_batch_id() -> str:
    return str(uuid4())


@dataclass
class CommitOutcome:
    """Per-row results of a commit loop.

    ``applied`` holds the records that were written (inserted or replaced)
    and ``failures`` the rows the store rejected.
    """

    batch_id: str
    applied: list[ValidatedRecord] = field(default_factory=list)
    failures: list[InsertFailure] = field(default_factory=list)


class BulkImportService(ABC):
    """Shared parse/validate/resolve pipeline and commit loop."""

    entity_label: str = "records"
    required_headers: list[str] = []
    batch_model: type = MaterialImportBatch
    resolver_class: type[DuplicateResolver] = MaterialDuplicateResolver

    def __init__(self, db: Session, imported_by: str | None = None):
        self.db = db
        self.imported_by = imported_by

    @abstractmethod
    def validate(self, row: dict[str, str], number: int) -> RowValidation:
        """Validate one parsed row."""

    async def classify(self, csv_text: str) -> ImportReport:
        """Parse, validate and resolve duplicates without writing anything.

        Raises:
            ImportInputError: If there is no CSV data or required headers
                are missing.
        """
        if not csv_text:
            raise ImportInputError("No CSV data provided")

        parsed = parse_csv(csv_text)
        missing = missing_headers(parsed.headers, self.required_headers)
        if missing:
            raise ImportInputError(
                "Missing required headers: " + ", ".join(missing),
                missingHeaders=missing,
                foundHeaders=parsed.headers,
                requiredHeaders=self.required_headers,
            )

        report = ImportReport(headers=parsed.headers, total=len(parsed.rows))
        records: list[ValidatedRecord] = []
        for index, row in enumerate(parsed.rows):
            number = row_number(index)
            result = self.validate(row, number)
            if result.is_valid:
                records.append(ValidatedRecord(row=number, raw=row, data=result.data))
            else:
                report.errors.append(RowError(row=number, data=row, errors=result.errors))

        resolver = self.resolver_class(self.db)
        for verdict in await resolver.resolve_all(records):
            resolver.place(verdict, report)

        logger.debug(
            "Classified %s import: total=%s valid=%s errors=%s duplicates=%s",
            self.entity_label,
            report.total,
            len(report.valid),
            len(report.errors),
            len(report.duplicates),
        )
        return report

    def _run_commit(
        self,
        report: ImportReport,
        batch_id: str,
        apply: Callable[[DuplicateVerdict, str], bool],
    ) -> CommitOutcome:
        """Apply each committable verdict, one row per transaction.

        ``apply`` returns False when it deliberately left the row alone.
        """
        outcome = CommitOutcome(batch_id=batch_id)
        for verdict in report.committable:
            record = verdict.record
            try:
                written = apply(verdict, batch_id)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.warning(
                    "Batch %s: row %s of %s import failed: %s",
                    batch_id,
                    record.row,
                    self.entity_label,
                    e,
                )
                outcome.failures.append(InsertFailure(row=record.row, data=record.data, error=str(e)))
                continue
            if written:
                outcome.applied.append(record)
        return outcome

    def _open_batch(self, report: ImportReport, batch_id: str) -> None:
        """Write the batch row before any entity is tagged with its id."""
        batch = self.batch_model(
            id=batch_id,
            imported_by=self.imported_by,
            total_count=report.total,
            success_count=0,
            error_count=len(report.errors),
            duplicate_count=len(report.duplicates),
            status=BatchStatus.COMPLETED.value,
        )
        self.db.add(batch)
        self.db.commit()

    def _record_batch(
        self, report: ImportReport, outcome: CommitOutcome, summary: dict[str, Any]
    ) -> None:
        """Fill in the final counts and summary of a finished commit."""
        batch = self.db.get(self.batch_model, outcome.batch_id)
        batch.success_count = len(outcome.applied)
        batch.error_count = len(report.errors) + len(outcome.failures)
        batch.summary = summary
        self.db.commit()
        logger.info(
            "Import batch %s committed: %s %s written, %s failed, %s duplicates",
            outcome.batch_id,
            len(outcome.applied),
            self.entity_label,
            len(outcome.failures),
            len(report.duplicates),
        )


class MaterialImportService(BulkImportService):
    """Materials import. Duplicates are excluded at classification time."""

    entity_label = "materials"
    required_headers = MATERIAL_REQUIRED_HEADERS
    batch_model = MaterialImportBatch
    resolver_class = MaterialDuplicateResolver

    def validate(self, row: dict[str, str], number: int) -> RowValidation:
        return validate_material_row(row, number)

    async def preview(self, csv_text: str) -> MaterialImportPreview:
        report = await self.classify(csv_text)
        return MaterialImportPreview(
            summary=MaterialImportSummary(
                total=report.total,
                valid=len(report.valid),
                errors=len(report.errors),
                duplicates=len(report.duplicates),
            ),
            valid=report.valid,
            errors=report.errors,
            duplicates=report.duplicates,
        )

    async def commit(self, csv_text: str) -> MaterialImportCommit:
        report = await self.classify(csv_text)

        if not report.committable:
            return MaterialImportCommit(
                message="No valid records to import",
                summary=MaterialImportSummary(
                    total=report.total,
                    valid=0,
                    errors=len(report.errors),
                    duplicates=len(report.duplicates),
                ),
                errors=report.errors,
                duplicates=report.duplicates,
            )

        batch_id = new_material_batch_id()
        self._open_batch(report, batch_id)
        outcome = self._run_commit(report, batch_id, self._apply)
        self._record_batch(report, outcome, material_batch_summary(outcome.applied))

        error_count = len(report.errors) + len(outcome.failures)
        return MaterialImportCommit(
            batch_id=batch_id,
            message=f"Successfully imported {len(outcome.applied)} materials",
            summary=MaterialCommitSummary(
                total=report.total,
                imported=len(outcome.applied),
                errors=error_count,
                duplicates=len(report.duplicates),
            ),
            imported=len(outcome.applied),
            errors=[*report.errors, *outcome.failures],
            duplicates=report.duplicates,
        )

    def _apply(self, verdict: DuplicateVerdict, batch_id: str) -> bool:
        self._insert(verdict.record, batch_id)
        return True

    def _insert(self, record: ValidatedRecord, batch_id: str) -> Material:
        data = record.data
        material = Material(
            school=data["school"],
            date=data["date"],
            grade_level=data["grade_level"],
            title=data["title"],
            link=data["link"],
            description=data["description"],
            password=data["password"],
            import_batch_id=batch_id,
        )
        self.db.add(material)
        self.db.commit()
        return material


def material_batch_summary(records: list[ValidatedRecord]) -> dict[str, Any]:
    """Distinct schools and grades plus the date range of inserted materials."""
    schools = sorted({r.data["school"] for r in records})
    grades = sorted({r.data["grade_level"] for r in records})
    dates = [r.data["date"] for r in records]
    return {
        "schools": schools,
        "grades": grades,
        "dateRange": {"min": min(dates), "max": max(dates)} if dates else None,
    }


class EventImportService(BulkImportService):
    """Events import. Duplicates are resolved at commit time by ``DuplicateAction``."""

    entity_label = "events"
    required_headers = EVENT_REQUIRED_HEADERS
    batch_model = EventImportBatch
    resolver_class = EventDuplicateResolver

    def validate(self, row: dict[str, str], number: int) -> RowValidation:
        return validate_event_row(row, number)

    def _summary(self, report: ImportReport) -> EventImportSummary:
        return EventImportSummary(
            total=report.total,
            valid=len(report.valid),
            invalid=len(report.errors),
            duplicates=len(report.duplicates),
        )

    async def preview(self, csv_text: str) -> EventImportPreview:
        report = await self.classify(csv_text)
        return EventImportPreview(
            summary=self._summary(report),
            valid=report.valid,
            invalid=report.errors,
            duplicates=report.duplicates,
            sample_valid=report.valid[:5],
            headers=report.headers,
        )

    async def commit(
        self, csv_text: str, duplicate_action: DuplicateAction = DuplicateAction.SKIP
    ) -> EventImportCommit:
        """Write valid events, handling flagged duplicates per ``duplicate_action``.

        Raises:
            ImportInputError: If no row passed validation.
        """
        report = await self.classify(csv_text)

        if not report.committable:
            raise ImportInputError(
                "No valid events to import",
                summary=self._summary(report).model_dump(),
            )

        batch_id = new_event_batch_id()

        def apply(verdict: DuplicateVerdict, batch: str) -> bool:
            return self._apply(verdict, batch, duplicate_action)

        self._open_batch(report, batch_id)
        outcome = self._run_commit(report, batch_id, apply)
        self._record_batch(
            report,
            outcome,
            {
                "totalRows": report.total,
                "validRows": len(report.valid),
                "invalidRows": len(report.errors),
                "duplicateRows": len(report.duplicates),
                "insertedCount": len(outcome.applied),
                "duplicateAction": duplicate_action.value,
            },
        )

        summary = self._summary(report)
        return EventImportCommit(
            imported=len(outcome.applied),
            batch_id=batch_id,
            duplicate_action=duplicate_action,
            summary=EventCommitSummary(**summary.model_dump(), inserted=len(outcome.applied)),
            errors=outcome.failures,
        )

    def _apply(
        self, verdict: DuplicateVerdict, batch_id: str, duplicate_action: DuplicateAction
    ) -> bool:
        if verdict.is_duplicate:
            if duplicate_action == DuplicateAction.SKIP:
                return False
            if duplicate_action == DuplicateAction.REPLACE:
                self._replace(verdict, batch_id)
                return True
        self._insert(verdict.record, batch_id)
        return True

    def _insert(self, record: ValidatedRecord, batch_id: str) -> Event:
        data = record.data
        event = Event(
            school=data["school"],
            date=data["date"],
            title=data["title"],
            department=data["department"],
            time=data["time"],
            description=data["description"],
            import_batch_id=batch_id,
        )
        self.db.add(event)
        self.db.commit()
        return event

    def _replace(self, verdict: DuplicateVerdict, batch_id: str) -> Event:
        """Overwrite the matched event's mutable fields and re-tag it."""
        event = self.db.get(Event, verdict.existing.id)
        if event is None:
            # Deleted since classification; nothing left to replace
            logger.info(
                "Event %s vanished before replace, inserting row %s instead",
                verdict.existing.id,
                verdict.record.row,
            )
            return self._insert(verdict.record, batch_id)

        data = verdict.record.data
        event.title = data["title"]
        event.department = data["department"]
        event.time = data["time"]
        event.description = data["description"]
        event.updated_at = datetime.utcnow()
        event.import_batch_id = batch_id
        self.db.commit()
        return event


def get_material_import_service(db: Session, imported_by: str | None = None) -> MaterialImportService:
    """Get a materials import service instance."""
    return MaterialImportService(db, imported_by)


def get_event_import_service(db: Session, imported_by: str | None = None) -> EventImportService:
    """Get an events import service instance."""
    return EventImportService(db, imported_by)
