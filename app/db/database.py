"""Engine and session factory."""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.config import get_settings
from app.db.models import Base

logger = logging.getLogger(__name__)
settings = get_settings()

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    connect_args=connect_args,
    echo=False,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> list[str]:
    """Create any missing tables and indexes.

    Safe to run repeatedly: existing tables are left untouched.

    Returns:
        list[str]: Names of the tables known to the schema.
    """
    target = bind if bind is not None else engine
    Base.metadata.create_all(bind=target)
    tables = sorted(Base.metadata.tables)
    logger.info("Database schema initialized: %s", ", ".join(tables))
    return tables
