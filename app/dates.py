"""Calendar date normalization."""

from datetime import date, datetime

# Tried in order after ISO 8601
_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%m/%d/%y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def format_date(value: str | date | datetime | None) -> str | None:
    """Normalize a date-like value to ``YYYY-MM-DD``.

    Args:
        value: A date, datetime, or date string (ISO 8601 and common
            US/long forms are accepted).

    Returns:
        str | None: The normalized date, or None for empty input.

    Raises:
        ValueError: If the value cannot be parsed as a calendar date.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text).date().isoformat()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue

    raise ValueError("Invalid date format")
