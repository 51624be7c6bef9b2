"""Database connection management for the Direct API.

Provides synchronous database access using SQLAlchemy. SQLite is the
development default; any SQLAlchemy URL can be configured.

Usage:
    from direct_api.db.connection import get_db, init_db

    init_db()  # Create tables
    db = next(get_db())
    # ... use db session
"""

import logging
import os
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from direct_api.config import get_config
from direct_api.db.models import Base

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """Get database URL from environment or configuration.

    Precedence:
    1. DATABASE_URL
    2. database.url from the loaded configuration
    """
    database_url = os.environ.get("DATABASE_URL", "").strip()
    if database_url:
        return database_url
    return get_config().database.url


DATABASE_URL = get_database_url()

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False}
    if DATABASE_URL.startswith("sqlite")
    else {},
    echo=get_config().database.echo,
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
    """Enable foreign keys for SQLite connections."""
    if DATABASE_URL.startswith("sqlite"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for the duration of a request.

    Intended for use with FastAPI's Depends().

    Yields:
        Session: SQLAlchemy session that will be closed after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """Context manager for database sessions outside of FastAPI.

    Usage:
        with get_db_context() as db:
            handle = UserDAO(db).get_user_handle(42)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create all reference tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized at %s", engine.url.render_as_string(hide_password=True))
