"""Database configuration and shared clients"""

import os

import redis
from sqlalchemy import create_engine, event
from sqlmodel import Session, SQLModel

from form_builder.config import config

# Database URL from config
DATABASE_URL = config["database_url"]

if not DATABASE_URL:
    raise ValueError(
        "DATABASE_URL environment variable is not set. "
        "Set DATABASE_URL in the environment or local .env file."
    )

_connect_args = (
    {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)

# Create engine
engine = create_engine(
    DATABASE_URL,
    echo=os.getenv("DEBUG", "false").lower() == "true",
    connect_args=_connect_args,
)


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on"""
    if DATABASE_URL.startswith("sqlite"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create Redis client (singleton) for designer sessions
redis_client = redis.from_url(
    config["redis_url"],
    decode_responses=True,
    max_connections=20,
    socket_connect_timeout=5,
    socket_keepalive=True,
    retry_on_timeout=True,
)


def init_db():
    """Create tables directly. Deployed databases are migrated with Alembic."""
    import form_builder.models  # noqa: F401  (registers tables on the metadata)

    SQLModel.metadata.create_all(engine)


def get_db():
    """Get database session"""
    with Session(engine) as session:
        yield session


def get_redis():
    """Get Redis client"""
    return redis_client
