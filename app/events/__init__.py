"""Calendar events."""

from app.events.router import router

__all__ = ["router"]
