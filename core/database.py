# core/database.py
# Central SQLAlchemy setup: engine factory, session factory, Base, schema bootstrap
# All models across the app must import THIS Base.

import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()

# Additive column changes for databases created by older builds.
# SQLite has no ADD COLUMN IF NOT EXISTS, so each one is attempted and a
# "duplicate column" failure is ignored.
ADDITIVE_COLUMNS = (
    "ALTER TABLE users ADD COLUMN first_name TEXT NOT NULL DEFAULT ''",
    "ALTER TABLE users ADD COLUMN last_name TEXT NOT NULL DEFAULT ''",
)


def build_engine(database_url: str, *, pool_size: int = 5, pool_timeout: int = 30) -> Engine:
    """
    Create the SQLAlchemy engine.

    The pool is capped at `pool_size` connections with no overflow, so at most
    that many database operations are in flight; further callers wait up to
    `pool_timeout` seconds for a connection.
    """
    is_sqlite = database_url.startswith("sqlite")
    # For SQLite + multithreaded FastAPI, set check_same_thread=False
    connect_args = {"check_same_thread": False} if is_sqlite else {}

    engine = create_engine(
        database_url,
        echo=False,
        future=True,
        connect_args=connect_args,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
    )

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            # WAL reduces writer blocks on readers; NORMAL is fine for a desktop db file
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA synchronous=NORMAL;")
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.close()

    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        future=True,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    """Create missing tables, then apply additive column changes best-effort."""
    # Import models so every table is registered on Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    for statement in ADDITIVE_COLUMNS:
        try:
            with engine.begin() as conn:
                conn.execute(text(statement))
            logger.info("[DB] applied: %s", statement)
        except OperationalError as e:
            # duplicate column name -> already migrated
            logger.debug("[DB] skipped %r: %s", statement, e.orig)


# Dependency for FastAPI routes
def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
