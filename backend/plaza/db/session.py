# backend/plaza/db/session.py
from __future__ import annotations

"""
Database session and Base ORM declarations.

This module depends on:
- plaza.config.settings.get_settings for the DATABASE_URL
It is imported by:
- plaza.models (for Base)
- plaza.main (for engine/Base)
- the repositories (for the transaction helper)
- any code needing a DB session (via SessionLocal or get_db)
"""

from contextlib import contextmanager
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from plaza.config import get_settings

# Load settings once; get_settings() is cached in plaza.config.settings
settings = get_settings()

_connect_args = (
    {"check_same_thread": False}
    if settings.database_url.startswith("sqlite")
    else {}
)

# SQLAlchemy engine for SQLite locally, PostgreSQL in deployments
engine = create_engine(
    settings.database_url,
    future=True,
    connect_args=_connect_args,
)

# Session factory used throughout the app
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
)

# Base class for all ORM models
Base = declarative_base()


def get_db():
    """
    FastAPI dependency that yields a DB session and ensures it is closed.

    Example usage in a route:
        from plaza.db.session import get_db
        def endpoint(db: Session = Depends(get_db)): ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Generator[Session, None, None]:
    """
    Run a multi-statement write atomically on an existing session.

    Commits when the block finishes and rolls everything back if it raises.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
