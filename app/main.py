"""FastAPI application entry point."""

import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.calendar import router as calendar_router
from app.config import get_settings
from app.db.database import init_db
from app.dependencies import DbSession
from app.events import router as events_router
from app.imports import router as imports_router
from app.materials import router as materials_router
from app.responses import api_response, error_response

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.app_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
    max_age=86400,
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as ``{"error": ...}``."""
    if exc.status_code == 404 and exc.detail == "Not Found":
        return error_response(
            "Not found", 404, path=request.url.path, method=request.method
        )
    return error_response(str(exc.detail), exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response("Invalid request", 400, details=exc.errors())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response("Internal server error", 500, message=str(exc))


# Bulk import routes are registered first so /materials/bulk and
# /events/bulk never fall through to the per-entity routes.
app.include_router(imports_router, prefix="/api", tags=["imports"])
app.include_router(calendar_router, prefix="/api", tags=["calendar"])
app.include_router(events_router, prefix="/api/events", tags=["events"])
app.include_router(materials_router, prefix="/api/materials", tags=["materials"])


@app.get("/api")
@app.get("/api/")
async def api_info():
    """Service description and endpoint map."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "environment": settings.environment,
        "endpoints": {
            "health": "/api/health",
            "init": "POST /api/init",
            "daySchedules": "/api/day-schedules",
            "dayTypes": "/api/day-types",
            "events": "/api/events",
            "materials": "/api/materials",
            "bulkImport": "POST /api/materials/bulk",
            "importHistory": "/api/materials/imports",
            "eventsBulkImport": "POST /api/events/bulk",
            "eventsImportHistory": "/api/events/imports",
        },
    }


@app.get("/api/health")
async def health(db: DbSession):
    """Check database connectivity."""
    try:
        timestamp = db.execute(text("SELECT CURRENT_TIMESTAMP")).scalar()
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        return error_response(
            "Database connection failed",
            500,
            connected=False,
            details=str(e),
            environment=settings.environment,
        )
    return {
        "status": "healthy",
        "message": "Database connected",
        "connected": True,
        "timestamp": str(timestamp),
        "environment": settings.environment,
    }


@app.post("/api/init")
async def initialize_database(db: DbSession):
    """Create missing tables and indexes."""
    try:
        tables = init_db(db.get_bind())
    except SQLAlchemyError as e:
        logger.exception("Database initialization failed")
        return error_response("Database initialization failed", 500, message=str(e))
    return api_response(
        {
            "message": "Database initialized successfully",
            "tables": tables,
            "environment": settings.environment,
            "timestamp": datetime.utcnow().isoformat(),
        }
    )
