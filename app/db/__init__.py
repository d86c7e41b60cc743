"""Database module."""

from app.db.database import SessionLocal, engine, get_db, init_db
from app.db.models import (
    Base,
    BatchStatus,
    DaySchedule,
    DayType,
    Event,
    EventImportBatch,
    Material,
    MaterialImportBatch,
)

__all__ = [
    "SessionLocal",
    "engine",
    "get_db",
    "init_db",
    "Base",
    "BatchStatus",
    "DaySchedule",
    "DayType",
    "Event",
    "EventImportBatch",
    "Material",
    "MaterialImportBatch",
]
