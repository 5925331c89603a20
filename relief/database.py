"""
Database engine initialisation and table definitions for the backend store.
"""

import sys
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    text,
)

from relief.config import (
    MAX_ADDRESS_LEN,
    MAX_CONTACT_EMAIL_LEN,
    MAX_CONTACT_NAME_LEN,
    MAX_CONTACT_PHONE_LEN,
    MAX_LOCATION_NAME_LEN,
    MAX_NAME_LEN,
    get_env,
)

metadata = MetaData()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


users = Table(
    "users", metadata,
    Column("id", String(36), primary_key=True, default=_new_id),
    Column("email", String(255), nullable=False, unique=True),
    Column("display_name", String(200)),
    Column("api_key", String(128), nullable=False, unique=True),
    Column("is_active", Boolean, nullable=False, default=True),
)

user_roles = Table(
    "user_roles", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False, index=True),
    Column("role", String(20), nullable=False),
)

resources = Table(
    "resources", metadata,
    Column("id", String(36), primary_key=True, default=_new_id),
    Column("name", String(MAX_NAME_LEN), nullable=False),
    Column("type", String(20), nullable=False),
    Column("description", Text),
    Column("location_name", String(MAX_LOCATION_NAME_LEN), nullable=False),
    Column("address", String(MAX_ADDRESS_LEN), nullable=False),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
    Column("status", String(20), nullable=False),
    Column("quantity", Integer),
    Column("contact_name", String(MAX_CONTACT_NAME_LEN)),
    Column("contact_phone", String(MAX_CONTACT_PHONE_LEN)),
    Column("contact_email", String(MAX_CONTACT_EMAIL_LEN)),
    Column("created_by", String(36), ForeignKey("users.id")),
    Column("created_at", DateTime(timezone=True), nullable=False, default=_utcnow),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow),
)


def init_engine(db_uri: str = None):
    """Create a SQLAlchemy engine and verify the connection."""
    db_uri = db_uri or get_env("DB_URI")
    engine = create_engine(db_uri, echo=False, future=True)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        print("ERROR: could not connect to DB:", e, file=sys.stderr)
        sys.exit(1)
    print("[init] Connected to DB.")
    return engine


def create_schema(engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)
