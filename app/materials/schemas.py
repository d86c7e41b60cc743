"""Pydantic schemas for materials."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class MaterialCreate(BaseModel):
    school: Optional[str] = None
    date: Optional[str] = None
    grade_level: Optional[Union[int, str]] = None
    title: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None
    password: Optional[str] = None


class MaterialUpdate(BaseModel):
    title: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None
    password: Optional[str] = None


class MaterialResponse(BaseModel):
    id: int
    school: str
    date: str
    grade_level: int
    title: str
    link: str
    description: Optional[str] = None
    password: Optional[str] = None
    import_batch_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
