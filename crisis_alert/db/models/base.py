"""
Shared SQLAlchemy base and helpers.
"""
import uuid
from datetime import datetime, UTC

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base


def now_utc():
    """Return an aware UTC datetime for default/updated timestamps."""
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid.uuid4())


# JSON on every dialect, JSONB when running against PostgreSQL
JsonColumn = JSON().with_variant(JSONB(), "postgresql")


Base = declarative_base()
