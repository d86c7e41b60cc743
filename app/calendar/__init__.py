"""Day schedules and day types."""

from app.calendar.router import router

__all__ = ["router"]
