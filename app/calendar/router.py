"""Day schedule and day type routes."""

from datetime import datetime

from fastapi import APIRouter, HTTPException, status

from app.calendar.schemas import (
    DayScheduleItem,
    DayScheduleUpdate,
    DayTypeItem,
    DayTypeUpdate,
    DayUpdateResult,
)
from app.dates import format_date
from app.db.models import DaySchedule, DayType
from app.dependencies import DbSession

router = APIRouter()

SCHEDULES = ("A", "B")


def _required_date(value: str | None) -> str:
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Date is required")
    try:
        return format_date(value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/day-schedules", response_model=list[DayScheduleItem])
async def list_day_schedules(db: DbSession):
    return db.query(DaySchedule).order_by(DaySchedule.date).all()


@router.post("/day-schedules", response_model=DayUpdateResult, response_model_exclude_none=True)
async def set_day_schedule(data: DayScheduleUpdate, db: DbSession):
    """Assign an A/B schedule to a date; an empty schedule clears it."""
    date = _required_date(data.date)
    existing = db.get(DaySchedule, date)

    if not data.schedule:
        if existing:
            db.delete(existing)
            db.commit()
        return DayUpdateResult(date=date)

    if data.schedule not in SCHEDULES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Schedule must be A or B"
        )

    if existing:
        existing.schedule = data.schedule
        existing.updated_at = datetime.utcnow()
    else:
        db.add(DaySchedule(date=date, schedule=data.schedule))
    db.commit()
    return DayUpdateResult(date=date, schedule=data.schedule)


@router.get("/day-types", response_model=list[DayTypeItem])
async def list_day_types(db: DbSession):
    return db.query(DayType).order_by(DayType.date).all()


@router.post("/day-types", response_model=DayUpdateResult, response_model_exclude_none=True)
async def set_day_type(data: DayTypeUpdate, db: DbSession):
    """Assign a day type to a date; an empty type clears it."""
    date = _required_date(data.date)
    existing = db.get(DayType, date)

    if not data.type:
        if existing:
            db.delete(existing)
            db.commit()
        return DayUpdateResult(date=date)

    if existing:
        existing.type = data.type
        existing.updated_at = datetime.utcnow()
    else:
        db.add(DayType(date=date, type=data.type))
    db.commit()
    return DayUpdateResult(date=date, type=data.type)
