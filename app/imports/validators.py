"""Per-row validation rules for materials and events."""

from dataclasses import dataclass, field
from typing import Any

from app.config import get_settings
from app.dates import format_date

settings = get_settings()


@dataclass
class RowValidation:
    """Outcome of validating one CSV row.

    ``data`` holds the normalized projection and is only set when
    ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    data: dict[str, Any] | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class ValidatedRecord:
    """A valid row with its display row number and normalized fields."""

    row: int
    raw: dict[str, str]
    data: dict[str, Any]


def _or_list(values: list) -> str:
    """Render ``[9, 10, 11, 12]`` as ``"9, 10, 11, or 12"``."""
    items = [str(v) for v in values]
    if len(items) <= 2:
        return " or ".join(items)
    return ", ".join(items[:-1]) + ", or " + items[-1]


def _parse_grade(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def validate_material_row(row: dict[str, str], row_number: int) -> RowValidation:
    """Validate a materials row.

    Args:
        row: Parsed CSV row keyed by lower-cased header.
        row_number: Display row number. Materials messages leave it out since
            the report already pairs each error list with its row.

    Returns:
        RowValidation: Collected errors, or the normalized material fields.
    """
    errors: list[str] = []
    schools = settings.schools
    grade_levels = settings.grade_levels

    school = row.get("school", "")
    if not school:
        errors.append("School is required")
    elif school.lower() not in schools:
        errors.append(f"School must be {_or_list(schools)}")

    formatted_date = None
    raw_date = row.get("date", "")
    if not raw_date:
        errors.append("Date is required")
    else:
        try:
            formatted_date = format_date(raw_date)
        except ValueError:
            errors.append("Invalid date format")

    raw_grade = row.get("grade_level", "")
    grade_level = _parse_grade(raw_grade)
    if not raw_grade:
        errors.append("Grade level is required")
    elif grade_level not in grade_levels:
        errors.append(f"Grade level must be {_or_list(grade_levels)}")

    if not row.get("title"):
        errors.append("Title is required")
    if not row.get("link"):
        errors.append("Link is required")

    if errors:
        return RowValidation(errors=errors)

    return RowValidation(
        data={
            **row,
            "school": school.lower(),
            "date": formatted_date,
            "grade_level": grade_level,
            "title": row["title"].strip(),
            "link": row["link"].strip(),
            "description": row.get("description") or "",
            "password": row.get("password") or "",
        }
    )


def _canonical_department(value: str) -> str | None:
    for department in settings.departments:
        if department.lower() == value.lower():
            return department
    return None


def validate_event_row(row: dict[str, str], row_number: int) -> RowValidation:
    """Validate an events row.

    Every message is prefixed with ``Row <n>:`` so errors stay readable when
    flattened out of the report.
    """
    errors: list[str] = []
    prefix = f"Row {row_number}:"
    schools = settings.schools

    school = row.get("school", "")
    if not school:
        errors.append(f"{prefix} School is required")
    elif school.lower() not in schools:
        quoted = [f"'{s}'" for s in schools]
        errors.append(f"{prefix} School must be {_or_list(quoted)}")

    formatted_date = None
    raw_date = row.get("date", "")
    if not raw_date:
        errors.append(f"{prefix} Date is required")
    else:
        try:
            formatted_date = format_date(raw_date)
        except ValueError:
            errors.append(f"{prefix} Invalid date format (use YYYY-MM-DD)")

    title = (row.get("title") or "").strip()
    if not title:
        errors.append(f"{prefix} Title is required")

    department = (row.get("department") or "").strip()
    canonical_department = None
    if department:
        canonical_department = _canonical_department(department)
        if canonical_department is None:
            errors.append(
                f"{prefix} Invalid department (must be {_or_list(settings.departments)})"
            )

    if errors:
        return RowValidation(errors=errors)

    time = (row.get("time") or "").strip()
    return RowValidation(
        data={
            "school": school.lower(),
            "date": formatted_date,
            "title": title,
            "department": canonical_department,
            "time": time or None,
            "description": (row.get("description") or "").strip(),
        }
    )
