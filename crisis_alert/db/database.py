"""
Database engine and session management.

Builds the SQLAlchemy engine from environment configuration, falling back to
an in-memory SQLite database (shared through a StaticPool) when no server is
configured, and exposes the session factory used by the database storage.
"""
import logging
import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

SQLITE_MEMORY_URL = "sqlite+pysqlite:///:memory:"


def _get_database_url() -> str:
    # If DATABASE_URL is explicitly set, use it
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    db_user = os.getenv("POSTGRES_USER")
    db_password = os.getenv("POSTGRES_PASSWORD")
    db_host = os.getenv("POSTGRES_HOST")
    db_port = os.getenv("POSTGRES_PORT")
    db_name = os.getenv("POSTGRES_DB")

    components = [db_user, db_password, db_host, db_port, db_name]
    if all(components):
        return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"
    if any(components):
        missing = []
        if not db_user: missing.append("POSTGRES_USER")
        if not db_password: missing.append("POSTGRES_PASSWORD")
        if not db_host: missing.append("POSTGRES_HOST")
        if not db_port: missing.append("POSTGRES_PORT")
        if not db_name: missing.append("POSTGRES_DB")
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    # Nothing configured: keep everything in process memory
    return SQLITE_MEMORY_URL


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite") and ":memory:" in url:
        # StaticPool so the schema persists across connections
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def build_engine(url: Optional[str] = None):
    """Create an engine for ``url`` (or the configured database)."""
    url = url or _get_database_url()
    logger.info("database_engine: dialect=%s", url.split(":", 1)[0])
    return create_engine(url, **_engine_kwargs(url))


DATABASE_URL = _get_database_url()

# Create the SQLAlchemy engine
engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

# Create a SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create all tables on ``bind``.

    Production schemas are managed by Alembic migrations; this is used for the
    in-memory database and for tests.
    """
    from crisis_alert.db import models  # local import to avoid circular import at module load
    models.Base.metadata.create_all(bind=bind or engine)

