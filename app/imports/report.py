"""In-memory classification of one import request."""

from dataclasses import dataclass, field

from app.imports.schemas import DuplicateRow, ExistingRecord, RowError, ValidRow
from app.imports.validators import ValidatedRecord


@dataclass
class DuplicateVerdict:
    """A validated record and the persisted entity sharing its natural key, if any."""

    record: ValidatedRecord
    existing: ExistingRecord | None = None

    @property
    def is_duplicate(self) -> bool:
        return self.existing is not None

    def as_duplicate_row(self) -> DuplicateRow:
        return DuplicateRow(
            row=self.record.row,
            data=self.record.raw,
            existing=self.existing,
            existing_id=self.existing.id,
        )


@dataclass
class ImportReport:
    """Partition of parsed rows into valid, invalid and duplicate buckets.

    ``committable`` holds the verdicts a commit should act on, in row order.
    """

    headers: list[str]
    total: int
    valid: list[ValidRow] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    duplicates: list[DuplicateRow] = field(default_factory=list)
    committable: list[DuplicateVerdict] = field(default_factory=list)
