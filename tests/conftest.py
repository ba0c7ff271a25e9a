"""Shared test configuration and fixtures for Form Builder tests"""

import logging

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import form_builder.models  # noqa: F401  (registers tables on the metadata)
from form_builder.main import app
from form_builder.models.database import get_db, get_redis
from form_builder.services.designer_session_store import DesignerSessionStore
from form_builder.services.form_service import FormService
from form_builder.services.submission_service import SubmissionService
from form_builder.utils.id_generator import SequentialIdGenerator
from tests.config import test_config

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        test_config["database_url"],
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    SQLModel.metadata.create_all(engine)

    yield engine

    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def _db_session(db_engine):
    """Private DB session for fixtures only.

    Do not use this fixture directly in tests. Prefer higher-level service
    fixtures like `form_service` or `submission_service` to avoid coupling
    tests to the session internals.
    """
    session = Session(db_engine)

    yield session

    # Cleanup
    session.close()


@pytest.fixture
def form_service(_db_session):
    """Create a FormService with deterministic form ids"""
    return FormService(_db_session, id_generator=SequentialIdGenerator())


@pytest.fixture
def submission_service(_db_session):
    """Create a SubmissionService with deterministic submission ids"""
    return SubmissionService(_db_session, id_generator=SequentialIdGenerator())


@pytest.fixture
def redis_client():
    """In-process Redis server shared by the store and the app under test"""
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def session_store(redis_client):
    """Create a DesignerSessionStore backed by the fake Redis"""
    return DesignerSessionStore(
        redis_client, ttl_seconds=test_config["designer_session_ttl"]
    )


@pytest.fixture
def client(_db_session, redis_client):
    """Test client using the test database and the fake Redis"""

    # Store original overrides to restore them later
    original_overrides = app.dependency_overrides.copy()

    def get_test_db():
        return _db_session

    def get_test_redis():
        return redis_client

    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_redis] = get_test_redis

    client = TestClient(app)

    yield client

    # Completely restore original state
    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)
