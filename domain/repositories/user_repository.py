"""User repository interface.

This module defines the abstract interface for user data access,
including the user-owned set of tag references.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from ..entities.pagination import PageRequest
from ..entities.user import UserEntity


class UserRepositoryInterface(ABC):
    """Abstract interface for user repository operations.

    The association between users and tags is owned by the user, so the
    tag set operations live on this repository as well.

    NOTE: All methods receive a fresh database session to ensure
    proper transaction management and avoid session leaks.
    """

    @abstractmethod
    async def get_by_id(self, db_session: Session, user_id: UUID) -> Optional[UserEntity]:
        """Retrieve a user by its unique identifier.

        Args:
            db_session (Session): Fresh database session for this operation.
            user_id (UUID): The unique identifier of the user.

        Returns:
            Optional[UserEntity]: The user if found, None otherwise.
        """
        pass

    @abstractmethod
    async def get_by_email(self, db_session: Session, email: str) -> Optional[UserEntity]:
        """Retrieve a user by its email address (exact match)."""
        pass

    @abstractmethod
    async def get_by_name_or_email(
        self, db_session: Session, name: str, email: str
    ) -> Optional[UserEntity]:
        """Retrieve any user whose name or email equals the given values."""
        pass

    @abstractmethod
    async def list_users(
        self, db_session: Session, page: PageRequest
    ) -> Tuple[List[UserEntity], int]:
        """Retrieve one page of all users, visible users first.

        Args:
            db_session (Session): Fresh database session for this operation.
            page (PageRequest): Requested page window.

        Returns:
            Tuple[List[UserEntity], int]: Users on the page and total count.
        """
        pass

    @abstractmethod
    async def count_visible(self, db_session: Session) -> int:
        """Count users that are not hidden."""
        pass

    @abstractmethod
    async def save(self, db_session: Session, user: UserEntity) -> UserEntity:
        """Save a user entity to the repository.

        For new users (id is None), this will create a new record.
        For existing users, the scalar fields are updated; the tag set is
        left untouched.

        Args:
            db_session (Session): Fresh database session for this operation.
            user (UserEntity): The user entity to save.

        Returns:
            UserEntity: The saved user with populated ID.

        Raises:
            DuplicateIdentityError: If the storage unique constraints on
                name or email reject the write.
        """
        pass

    @abstractmethod
    async def delete(self, db_session: Session, user_id: UUID) -> Optional[UserEntity]:
        """Remove a user and its own tag references.

        Returns:
            Optional[UserEntity]: The removed user, or None if it did not exist.
        """
        pass

    @abstractmethod
    async def add_tags(
        self, db_session: Session, user_id: UUID, tag_ids: Sequence[UUID]
    ) -> Optional[UserEntity]:
        """Add tag references to a user's tag set.

        References already present are kept once; duplicates in ``tag_ids``
        are collapsed.

        Args:
            db_session (Session): Fresh database session for this operation.
            user_id (UUID): The user to tag.
            tag_ids (Sequence[UUID]): Identifiers of existing tags.

        Returns:
            Optional[UserEntity]: The updated user, or None if it does not exist.
        """
        pass

    @abstractmethod
    async def remove_tag(
        self, db_session: Session, user_id: UUID, tag_id: UUID
    ) -> Optional[UserEntity]:
        """Remove a tag reference from a user's tag set if present.

        Returns:
            Optional[UserEntity]: The updated user, or None if it does not exist.
        """
        pass

    @abstractmethod
    async def any_with_tag(self, db_session: Session, tag_id: UUID) -> bool:
        """Check whether at least one user, hidden or not, references a tag."""
        pass

    @abstractmethod
    async def find_visible_by_tag(
        self, db_session: Session, tag_id: UUID, page: PageRequest
    ) -> Tuple[List[UserEntity], int]:
        """Retrieve visible users referencing a tag, ordered by name.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (UUID): The tag to look for.
            page (PageRequest): Requested page window.

        Returns:
            Tuple[List[UserEntity], int]: Users on the page and total count.
        """
        pass

    @abstractmethod
    async def find_with_all_tags(
        self, db_session: Session, tag_ids: Sequence[UUID], page: PageRequest
    ) -> Tuple[List[UserEntity], int]:
        """Retrieve users whose tag set contains every one of ``tag_ids``.

        Hidden users are included and ordered after visible ones.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_ids (Sequence[UUID]): Required tags.
            page (PageRequest): Requested page window.

        Returns:
            Tuple[List[UserEntity], int]: Users on the page and total count.
        """
        pass

    @abstractmethod
    async def list_tag_references(self, db_session: Session) -> List[UUID]:
        """Return every tag reference held by every user, in attach order.

        A tag referenced by N users appears N times.
        """
        pass
