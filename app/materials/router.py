"""Material CRUD routes."""

from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, status

from app.config import get_settings
from app.dates import format_date
from app.db.models import Material
from app.dependencies import DbSession
from app.events.router import check_school
from app.events.schemas import DeleteResult
from app.materials.schemas import MaterialCreate, MaterialResponse, MaterialUpdate

settings = get_settings()

router = APIRouter()


def _grade_level(value: int | str | None) -> int:
    try:
        grade = int(value)
    except (TypeError, ValueError):
        grade = None
    if grade not in settings.grade_levels:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Grade level must be 9, 10, 11, or 12",
        )
    return grade


@router.get("", response_model=list[MaterialResponse])
async def list_materials(db: DbSession, school: str | None = Query(None)):
    school = check_school(school)
    return (
        db.query(Material)
        .filter(Material.school == school)
        .order_by(Material.date, Material.grade_level, Material.id)
        .all()
    )


@router.post("", response_model=MaterialResponse)
async def create_material(data: MaterialCreate, db: DbSession):
    if not (data.school and data.date and data.grade_level and data.title and data.link):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="School, date, grade_level, title, and link are required",
        )
    check_school(data.school)
    grade_level = _grade_level(data.grade_level)
    try:
        date = format_date(data.date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    material = Material(
        school=data.school,
        date=date,
        grade_level=grade_level,
        title=data.title,
        link=data.link,
        description=data.description or "",
        password=data.password or "",
    )
    db.add(material)
    db.commit()
    db.refresh(material)
    return material


@router.put("/{material_id}", response_model=MaterialResponse)
async def update_material(material_id: int, data: MaterialUpdate, db: DbSession):
    if not data.title or not data.link:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Title and link are required"
        )

    material = db.get(Material, material_id)
    if not material:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Material not found")

    material.title = data.title
    material.link = data.link
    material.description = data.description or ""
    material.password = data.password or ""
    material.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(material)
    return material


@router.delete("/{material_id}", response_model=DeleteResult)
async def delete_material(material_id: int, db: DbSession):
    deleted = db.query(Material).filter(Material.id == material_id).delete(synchronize_session=False)
    db.commit()
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Material not found")
    return DeleteResult(id=material_id)
