"""SQLAlchemy models for the calendar store."""

import enum
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all models."""


class BatchStatus(str, enum.Enum):
    """Lifecycle of an import batch."""

    COMPLETED = "completed"
    UNDONE = "undone"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class DaySchedule(TimestampMixin, Base):
    """A/B rotation assigned to a calendar date."""

    __tablename__ = "day_schedules"

    date: Mapped[str] = mapped_column(String(10), primary_key=True)
    schedule: Mapped[str] = mapped_column(String(1))


class DayType(TimestampMixin, Base):
    """Free-form day classification (late start, no school, ...)."""

    __tablename__ = "day_types"

    date: Mapped[str] = mapped_column(String(10), primary_key=True)
    type: Mapped[str] = mapped_column(String(100))


class Event(TimestampMixin, Base):
    """Calendar event for one school."""

    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_school_date_title", "school", "date", "title"),
        Index("idx_events_date", "date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    school: Mapped[str] = mapped_column(String(10))
    date: Mapped[str] = mapped_column(String(10))
    title: Mapped[str] = mapped_column(String(255))
    department: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    time: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, default="")
    import_batch_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)


class Material(TimestampMixin, Base):
    """Downloadable material for a school and grade level."""

    __tablename__ = "materials"
    __table_args__ = (
        Index("idx_materials_school_grade_link", "school", "grade_level", "link"),
        Index("idx_materials_school_date_grade", "school", "date", "grade_level"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    school: Mapped[str] = mapped_column(String(10))
    date: Mapped[str] = mapped_column(String(10))
    grade_level: Mapped[int] = mapped_column(Integer)
    title: Mapped[str] = mapped_column(String(255))
    link: Mapped[str] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text, default="")
    # Plaintext access password, passed through as entered
    password: Mapped[Optional[str]] = mapped_column(String(255), default="")
    import_batch_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)


class ImportBatchMixin:
    """Audit record for one committed bulk import."""

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    imported_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    imported_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    total_count: Mapped[int] = mapped_column(Integer)
    success_count: Mapped[int] = mapped_column(Integer)
    error_count: Mapped[int] = mapped_column(Integer)
    duplicate_count: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default=BatchStatus.COMPLETED.value)
    summary: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)


class MaterialImportBatch(ImportBatchMixin, Base):
    __tablename__ = "import_batches"


class EventImportBatch(ImportBatchMixin, Base):
    __tablename__ = "events_import_batches"
