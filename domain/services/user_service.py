"""User domain service for the user tags service.

This module contains the UserService that handles registration, profile
management, visibility and login.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from domain.entities.pagination import Page, PageRequest
from domain.entities.user import MIN_PASSWORD_LENGTH, UserEntity
from domain.exceptions import (
    DuplicateIdentityError,
    HiddenUserError,
    InvalidCredentialsError,
    UserNotFoundError,
    WeakPasswordError,
)

if TYPE_CHECKING:
    from domain.repositories.user_repository import UserRepositoryInterface
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

UPDATABLE_USER_FIELDS = frozenset(
    {"name", "birth_date", "email", "password", "is_admin", "is_hidden"}
)


class UserService:
    """Domain service for handling user operations.

    Passwords are stored and compared in plaintext. Profile updates do not
    re-check name/email uniqueness or password length; only the storage
    unique constraints guard name and email after registration.
    """

    def __init__(self, user_repository: "UserRepositoryInterface"):
        """Initialize the user service with dependencies.

        Args:
            user_repository: Repository for performing user operations
        """
        self._user_repository = user_repository

    async def create_user(
        self,
        db_session: "Session",
        name: str,
        birth_date: date,
        email: str,
        password: str,
        is_admin: bool = False,
        is_hidden: bool = False,
    ) -> UserEntity:
        """Register a new user.

        Args:
            db_session: Database session for this operation
            name: Unique user name
            birth_date: Date of birth
            email: Unique email address
            password: Plaintext password, at least 8 characters
            is_admin: Administrative flag
            is_hidden: Visibility flag

        Returns:
            UserEntity: Created user with assigned ID

        Raises:
            DuplicateIdentityError: If the name or email is already in use
            WeakPasswordError: If the password is too short
            ValueError: If the name is empty or the email is malformed
        """
        logger.info(f"Registering user '{name}'")

        existing_user = await self._user_repository.get_by_name_or_email(
            db_session, name, email
        )
        if existing_user:
            logger.warning(f"Registration rejected: '{name}' or '{email}' already in use")
            raise DuplicateIdentityError("User name or email is already in use")

        user = UserEntity(
            id=None,
            name=name,
            birth_date=birth_date,
            email=email,
            password=password,
            is_admin=is_admin,
            is_hidden=is_hidden,
        )

        if not user.has_strong_password():
            raise WeakPasswordError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if not name or not name.strip():
            raise ValueError("User name cannot be empty")
        if not user.has_valid_email():
            raise ValueError(f"Invalid email address: {email}")

        created_user = await self._user_repository.save(db_session, user)
        logger.info(f"Successfully registered user {created_user.id}")
        return created_user

    async def get_user(self, db_session: "Session", user_id: UUID) -> Optional[UserEntity]:
        """Get a user by ID with the derived age populated.

        Args:
            db_session: Database session for this operation
            user_id: UUID of the user

        Returns:
            Optional[UserEntity]: The user with ``age`` set, or None
        """
        user = await self._user_repository.get_by_id(db_session, user_id)
        return user.with_age() if user else None

    async def list_users(
        self, db_session: "Session", page: PageRequest
    ) -> Page[UserEntity]:
        """Get a page of all users, visible users first.

        Args:
            db_session: Database session for this operation
            page: Requested page window

        Returns:
            Page[UserEntity]: Users and pagination metadata
        """
        users, total = await self._user_repository.list_users(db_session, page)
        logger.info(f"Retrieved {len(users)} of {total} users on page {page.page}")
        return Page.build(users, total, page)

    async def update_user(
        self, db_session: "Session", user_id: UUID, changes: Dict[str, Any]
    ) -> Optional[UserEntity]:
        """Apply a partial update to a user's profile.

        Args:
            db_session: Database session for this operation
            user_id: UUID of the user to update
            changes: New values for profile fields; tags are not updatable here.
                None values are skipped, every profile field is required

        Returns:
            Optional[UserEntity]: Updated user, or None if not found

        Raises:
            DuplicateIdentityError: If storage rejects a colliding name or email
        """
        user = await self._user_repository.get_by_id(db_session, user_id)
        if not user:
            logger.warning(f"User {user_id} not found for update")
            return None

        for key, value in changes.items():
            if key in UPDATABLE_USER_FIELDS and value is not None:
                setattr(user, key, value)

        updated_user = await self._user_repository.save(db_session, user)
        logger.info(f"Updated user {user_id}")
        return updated_user

    async def delete_user(self, db_session: "Session", user_id: UUID) -> Optional[UserEntity]:
        """Delete a user. Tags referenced by the user are left untouched."""
        removed_user = await self._user_repository.delete(db_session, user_id)
        if removed_user:
            logger.info(f"Deleted user {user_id}")
        else:
            logger.warning(f"User {user_id} not found for deletion")
        return removed_user

    async def set_hidden(
        self, db_session: "Session", user_id: UUID, is_hidden: bool
    ) -> Optional[UserEntity]:
        """Hide or show a user.

        Args:
            db_session: Database session for this operation
            user_id: UUID of the user
            is_hidden: New visibility flag

        Returns:
            Optional[UserEntity]: Updated user, or None if not found
        """
        user = await self._user_repository.get_by_id(db_session, user_id)
        if not user:
            return None

        user.is_hidden = is_hidden
        updated_user = await self._user_repository.save(db_session, user)
        logger.info(f"User {user_id} is_hidden set to {is_hidden}")
        return updated_user

    async def login(self, db_session: "Session", email: str, password: str) -> UserEntity:
        """Authenticate a user by email and plaintext password.

        Args:
            db_session: Database session for this operation
            email: Email address of the user
            password: Password to compare

        Returns:
            UserEntity: The authenticated user

        Raises:
            UserNotFoundError: If no user has this email
            HiddenUserError: If the user is hidden
            InvalidCredentialsError: If the password does not match
        """
        user = await self._user_repository.get_by_email(db_session, email)
        if not user:
            logger.warning(f"Login failed: no user with email {email}")
            raise UserNotFoundError(f"User with email {email} not found")

        if user.is_hidden:
            logger.warning(f"Login refused for hidden user {user.id}")
            raise HiddenUserError("This user is hidden and cannot log in")

        if not user.check_password(password):
            logger.warning(f"Login failed: wrong password for user {user.id}")
            raise InvalidCredentialsError("Incorrect password")

        logger.info(f"User {user.id} logged in")
        return user

    async def count_visible(self, db_session: "Session") -> int:
        return await self._user_repository.count_visible(db_session)
