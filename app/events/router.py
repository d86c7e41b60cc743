"""Event CRUD routes."""

from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, status

from app.config import get_settings
from app.dates import format_date
from app.db.models import Event
from app.dependencies import DbSession
from app.events.schemas import DeleteResult, EventCreate, EventResponse, EventUpdate

settings = get_settings()

router = APIRouter()


def check_school(school: str | None) -> str:
    """Raise 400 unless ``school`` is one of the configured site codes."""
    if not school:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="School parameter is required"
        )
    if school not in settings.schools:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"School must be {' or '.join(settings.schools)}",
        )
    return school


@router.get("", response_model=list[EventResponse])
async def list_events(db: DbSession, school: str | None = Query(None)):
    school = check_school(school)
    return (
        db.query(Event)
        .filter(Event.school == school)
        .order_by(Event.date, Event.time, Event.id)
        .all()
    )


@router.post("", response_model=EventResponse)
async def create_event(data: EventCreate, db: DbSession):
    if not data.school or not data.date or not data.title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="School, date, and title are required",
        )
    check_school(data.school)
    try:
        date = format_date(data.date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    event = Event(
        school=data.school,
        date=date,
        title=data.title,
        department=data.department or None,
        time=data.time or None,
        description=data.description or "",
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(event_id: int, data: EventUpdate, db: DbSession):
    if not data.title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")

    event = db.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")

    event.title = data.title
    event.department = data.department or None
    event.time = data.time or None
    event.description = data.description or ""
    event.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(event)
    return event


@router.delete("/{event_id}", response_model=DeleteResult)
async def delete_event(event_id: int, db: DbSession):
    deleted = db.query(Event).filter(Event.id == event_id).delete(synchronize_session=False)
    db.commit()
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return DeleteResult(id=event_id)
