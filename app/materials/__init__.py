"""Downloadable materials."""

from app.materials.router import router

__all__ = ["router"]
