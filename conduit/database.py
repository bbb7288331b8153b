"""
Database engine, session factory and declarative base for Conduit.

The URL comes from ``CONDUIT_DATABASE_URL`` (SQLite by default).
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import get_settings

DATABASE_URL = get_settings().database_url

_is_sqlite = make_url(DATABASE_URL).get_backend_name() == "sqlite"

engine = create_engine(
    DATABASE_URL,
    # SQLite connections are shared across FastAPI's worker threads
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)


if _is_sqlite:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """History cascades rely on SQLite enforcing foreign keys."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def init_db():
    """Create the saved request and history tables if missing."""
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_db():
    """FastAPI dependency yielding a session that is closed after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
