"""Pydantic schemas for day schedules and day types."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class DayScheduleItem(BaseModel):
    date: str
    schedule: str

    model_config = ConfigDict(from_attributes=True)


class DayScheduleUpdate(BaseModel):
    """Set (``A``/``B``) or clear (empty/null) the schedule for a date."""

    date: Optional[str] = None
    schedule: Optional[str] = None


class DayTypeItem(BaseModel):
    date: str
    type: str

    model_config = ConfigDict(from_attributes=True)


class DayTypeUpdate(BaseModel):
    """Set or clear (empty/null) the day type for a date."""

    date: Optional[str] = None
    type: Optional[str] = None


class DayUpdateResult(BaseModel):
    success: bool = True
    date: str
    schedule: Optional[str] = None
    type: Optional[str] = None
