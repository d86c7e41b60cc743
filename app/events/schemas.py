"""Pydantic schemas for events."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class EventCreate(BaseModel):
    school: Optional[str] = None
    date: Optional[str] = None
    title: Optional[str] = None
    department: Optional[str] = None
    time: Optional[str] = None
    description: Optional[str] = None


class EventUpdate(BaseModel):
    title: Optional[str] = None
    department: Optional[str] = None
    time: Optional[str] = None
    description: Optional[str] = None


class EventResponse(BaseModel):
    id: int
    school: str
    date: str
    title: str
    department: Optional[str] = None
    time: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class DeleteResult(BaseModel):
    success: bool = True
    id: int
