"""Database and service dependencies for the User Tags Service.

This module provides dependency injection functions for FastAPI,
including database session management and domain service factories.

Functions:
    - get_db: Database session factory with automatic cleanup
    - get_tag_service: Tag Store with its repositories
    - get_user_service: User Store with its repository
    - get_association_service: Association service wired to both stores

Architecture:
    These utilities are shared across all layers and provide clean dependency
    injection for database access. Services hold repositories only; the
    session is passed to every call.
"""

import logging
from typing import Generator

from domain.services.association_service import AssociationService
from domain.services.tag_service import TagService
from domain.services.user_service import UserService
from infrastructure.repositories.sqlalchemy_tag_repository import (
    SqlAlchemyTagRepository,
)
from infrastructure.repositories.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import DATABASE_URL, LOG_LEVEL

# Configure logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Database setup
engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup.

    Yields:
        Session: SQLAlchemy database session that automatically closes after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_tag_service() -> TagService:
    """Create the tag service with its repository dependencies.

    The session is injected per-request in each endpoint method.

    Returns:
        TagService: Configured domain service ready for use.
    """
    return TagService(SqlAlchemyTagRepository(), SqlAlchemyUserRepository())


def get_user_service() -> UserService:
    return UserService(SqlAlchemyUserRepository())


def get_association_service() -> AssociationService:
    """Create the association service on top of both repositories.

    Returns:
        AssociationService: Configured domain service ready for use.
    """
    tag_repository = SqlAlchemyTagRepository()
    user_repository = SqlAlchemyUserRepository()
    tag_service = TagService(tag_repository, user_repository)
    return AssociationService(tag_repository, user_repository, tag_service)
