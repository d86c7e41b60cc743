"""Duplicate resolution against persisted materials and events.

Each entity kind has its own policy:

- Materials: a natural-key match excludes the row from the import.
- Events: a match keeps the row valid but flags it ``isDuplicate`` so the
  commit-time ``duplicateAction`` decides what happens.

Both implement ``DuplicateResolver``: look up the existing entity, then
place the verdict into an ``ImportReport``.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy.orm import Session

from app.db.models import Event, Material
from app.imports.report import DuplicateVerdict, ImportReport
from app.imports.schemas import ExistingRecord, ValidRow
from app.imports.validators import ValidatedRecord


class DuplicateResolver(ABC):
    """Abstract base for natural-key duplicate policies."""

    def __init__(self, db: Session):
        self.db = db

    @abstractmethod
    def natural_key(self, data: dict[str, Any]) -> tuple:
        """Return the natural-key tuple for normalized record data."""

    @abstractmethod
    async def find_existing(self, data: dict[str, Any]) -> ExistingRecord | None:
        """Point lookup of a persisted entity sharing the natural key."""

    @abstractmethod
    def place(self, verdict: DuplicateVerdict, report: ImportReport) -> None:
        """Record the verdict in the report according to this policy."""

    async def resolve(self, record: ValidatedRecord) -> DuplicateVerdict:
        existing = await self.find_existing(record.data)
        return DuplicateVerdict(record=record, existing=existing)

    async def resolve_all(self, records: list[ValidatedRecord]) -> list[DuplicateVerdict]:
        """Resolve every record; results keep the input order.

        Lookups are independent and awaited together; all of them finish
        before this returns.
        """
        return list(await asyncio.gather(*(self.resolve(r) for r in records)))


class MaterialDuplicateResolver(DuplicateResolver):
    """Materials match on (school, grade_level, link); matches are excluded."""

    def natural_key(self, data: dict[str, Any]) -> tuple:
        return (data["school"], data["grade_level"], data["link"])

    async def find_existing(self, data: dict[str, Any]) -> ExistingRecord | None:
        school, grade_level, link = self.natural_key(data)
        material = (
            self.db.query(Material)
            .filter(
                Material.school == school,
                Material.grade_level == grade_level,
                Material.link == link,
            )
            .order_by(Material.id)
            .first()
        )
        if not material:
            return None
        return ExistingRecord(id=material.id, title=material.title, date=material.date)

    def place(self, verdict: DuplicateVerdict, report: ImportReport) -> None:
        if verdict.is_duplicate:
            report.duplicates.append(verdict.as_duplicate_row())
            return
        report.valid.append(ValidRow(row=verdict.record.row, data=verdict.record.data))
        report.committable.append(verdict)


class EventDuplicateResolver(DuplicateResolver):
    """Events match on (school, date, title); matches stay valid but flagged."""

    def natural_key(self, data: dict[str, Any]) -> tuple:
        return (data["school"], data["date"], data["title"])

    async def find_existing(self, data: dict[str, Any]) -> ExistingRecord | None:
        school, date, title = self.natural_key(data)
        event = (
            self.db.query(Event)
            .filter(Event.school == school, Event.date == date, Event.title == title)
            .order_by(Event.id)
            .first()
        )
        if not event:
            return None
        return ExistingRecord(id=event.id, title=event.title, date=event.date)

    def place(self, verdict: DuplicateVerdict, report: ImportReport) -> None:
        if verdict.is_duplicate:
            report.duplicates.append(verdict.as_duplicate_row())
        report.valid.append(
            ValidRow(
                row=verdict.record.row,
                data=verdict.record.data,
                is_duplicate=verdict.is_duplicate,
            )
        )
        report.committable.append(verdict)
