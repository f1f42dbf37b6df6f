"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine for a local
SQLite database and provides small helpers used by the application and
tests. The database file defaults to `backend/data/app.db` and can be
moved with the `DB_PATH` environment variable (`:memory:` is accepted
for tests).
"""

from pathlib import Path

from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .config import settings

IN_MEMORY = settings.DB_PATH == ":memory:"


def _build_engine():
    if IN_MEMORY:
        # a single shared connection, otherwise each checkout sees an empty db
        return create_engine(
            "sqlite://",
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    Path(settings.DB_PATH).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        f"sqlite:///{settings.DB_PATH}",
        echo=False,
        connect_args={"check_same_thread": False},
    )


engine = _build_engine()


@event.listens_for(engine, "connect")
def _set_sqlite_pragmas(dbapi_connection, _connection_record):
    """Enable foreign keys (and WAL for file databases) on every connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    if not IN_MEMORY:
        cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_db_and_tables():
    """Create the `users` and `applications` tables if they are missing.

    The schema is small and additive, so `create_all` is enough for local
    development and tests.
    """
    # imported for its side effect of registering the table metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
