"""Database session management.

Provides engine and session factory construction for the response
store. The application owns one engine and one factory (kept on
``app.state``); nothing here is cached at module level.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from opensurvey.db.schema import Base


def create_db_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine for the database.

    SQLite URLs get check_same_thread=False so FastAPI's worker threads
    can share the connection; in-memory SQLite additionally uses a
    StaticPool so every session sees the same database.

    Args:
        database_url: SQLAlchemy database URL.

    Returns:
        SQLAlchemy engine instance.
    """
    url = make_url(database_url)

    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, echo=False, pool_pre_ping=True)

    database = url.database
    if not database or database == ":memory:":
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # Create parent directories for file-backed SQLite
    Path(database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory bound to *engine*."""
    return sessionmaker(bind=engine)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup.

    Commits on successful exit, rolls back on exception, and always
    closes the session.

    Args:
        factory: Session factory to open the session from.

    Yields:
        SQLAlchemy Session instance.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Initialize database schema.

    Call this once during application startup to create tables.

    Args:
        engine: Engine of the target database.
    """
    Base.metadata.create_all(engine)
