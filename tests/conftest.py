"""
Shared fixtures for the user tags service tests.

Every test gets its own in-memory SQLite database. The application engine
configured from DATABASE_URL is never used for data: routers receive
sessions bound to the test database through dependency overrides.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from domain.services.association_service import AssociationService
from domain.services.tag_service import TagService
from domain.services.user_service import UserService
from infrastructure.models import associations, tag_orm, user_orm  # noqa: F401
from infrastructure.models.base import Base
from infrastructure.repositories.sqlalchemy_tag_repository import SqlAlchemyTagRepository
from infrastructure.repositories.sqlalchemy_user_repository import SqlAlchemyUserRepository


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by all connections of one test.

    Foreign keys are enforced like on PostgreSQL.
    """
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Database session for service and repository tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tag_repository():
    return SqlAlchemyTagRepository()


@pytest.fixture
def user_repository():
    return SqlAlchemyUserRepository()


@pytest.fixture
def tag_service(tag_repository, user_repository):
    return TagService(tag_repository, user_repository)


@pytest.fixture
def user_service(user_repository):
    return UserService(user_repository)


@pytest.fixture
def association_service(tag_repository, user_repository, tag_service):
    return AssociationService(tag_repository, user_repository, tag_service)


@pytest.fixture
def birth_date():
    """Birth date used for registered test users."""
    return date(1990, 5, 17)


@pytest.fixture
def client(session_factory):
    """TestClient whose requests use the per-test database."""
    from main import app
    from utils.dependencies import get_db

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
