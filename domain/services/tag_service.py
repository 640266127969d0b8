"""Tag domain service.

This module contains the TagService that implements business logic
for tag operations, orchestrating between entities and repositories.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from domain.entities.pagination import Page, PageRequest
from domain.entities.tag import TagEntity
from domain.exceptions import DuplicateNameError
from domain.repositories.tag_repository import TagRepositoryInterface
from domain.repositories.user_repository import UserRepositoryInterface
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

UPDATABLE_TAG_FIELDS = frozenset({"name", "description", "category", "is_active"})
NULLABLE_TAG_FIELDS = frozenset({"description", "category"})


class TagService:
    """Domain service for tag business operations.

    This service owns the tag records: creation, lookup, update, soft and
    hard deletion, and text search. Deleting a tag needs to know whether
    any user still references it, so the user repository is injected too.

    Attributes:
        _tag_repository (TagRepositoryInterface): Repository for tag data access.
        _user_repository (UserRepositoryInterface): Repository used to check
            tag references before deletion.

    Example:
        >>> service = TagService(tag_repository, user_repository)
        >>> with get_db_session() as db:
        ...     page = await service.list_tags(db, PageRequest(page=1, page_size=10))
        ...     print(page.total)
        5
    """

    def __init__(
        self,
        tag_repository: TagRepositoryInterface,
        user_repository: UserRepositoryInterface,
    ) -> None:
        """Initialize the tag service with required dependencies.

        Args:
            tag_repository (TagRepositoryInterface): Repository implementation for tag data access.
            user_repository (UserRepositoryInterface): Repository implementation for user data access.
        """
        self._tag_repository = tag_repository
        self._user_repository = user_repository

    async def create_tag(
        self,
        db_session: Session,
        name: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
        is_active: bool = True,
    ) -> TagEntity:
        """Create a new tag.

        The name is checked against existing tags first; the repository's
        unique constraint catches concurrent creations that slip past the
        check.

        Args:
            db_session (Session): Fresh database session for this operation.
            name (str): The name for the new tag, matched exactly.
            description (Optional[str]): Optional description.
            category (Optional[str]): Optional category.
            is_active (bool): Whether the tag starts active.

        Returns:
            TagEntity: The created tag entity with assigned ID and creation time.

        Raises:
            DuplicateNameError: If a tag with the same name already exists.
            ValueError: If the tag name is empty.

        Example:
            >>> with get_db_session() as db:
            ...     tag = await service.create_tag(db, "python", category="language")
            ...     print(tag.is_active)
            True
        """
        new_tag = TagEntity(
            id=None,
            name=name,
            description=description,
            category=category,
            is_active=is_active,
        )

        existing_tag = await self._tag_repository.get_by_name(db_session, name)
        if existing_tag:
            logger.warning(f"Tag '{name}' already exists with ID {existing_tag.id}")
            raise DuplicateNameError(f"Tag with name '{name}' already exists")

        created_tag = await self._tag_repository.save(db_session, new_tag)
        logger.info(f"Created tag '{created_tag.name}' with ID {created_tag.id}")
        return created_tag

    async def get_tag(self, db_session: Session, tag_id: UUID) -> Optional[TagEntity]:
        """Retrieve a tag by its unique identifier, whether active or not.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (UUID): The unique identifier of the tag to retrieve.

        Returns:
            Optional[TagEntity]: The tag, or None if it does not exist.
        """
        return await self._tag_repository.get_by_id(db_session, tag_id)

    async def get_tag_by_name(self, db_session: Session, name: str) -> Optional[TagEntity]:
        return await self._tag_repository.get_by_name(db_session, name)

    async def list_tags(self, db_session: Session, page: PageRequest) -> Page[TagEntity]:
        """Retrieve one page of active tags ordered by name.

        Args:
            db_session (Session): Fresh database session for this operation.
            page (PageRequest): Requested page window.

        Returns:
            Page[TagEntity]: The tags on the page with pagination metadata.
        """
        tags, total = await self._tag_repository.list_active(db_session, page)
        return Page.build(tags, total, page)

    async def update_tag(
        self, db_session: Session, tag_id: UUID, changes: Dict[str, Any]
    ) -> Optional[TagEntity]:
        """Apply a partial update to a tag.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (UUID): The unique identifier of the tag to update.
            changes (Dict[str, Any]): New values for any of name, description,
                category and is_active. Other keys are ignored, as is a None
                value for name or is_active.

        Returns:
            Optional[TagEntity]: The updated tag, or None if it does not exist.

        Raises:
            DuplicateNameError: If another tag already uses the new name.
            ValueError: If the new name is empty.
        """
        existing_tag = await self._tag_repository.get_by_id(db_session, tag_id)
        if not existing_tag:
            logger.warning(f"Tag {tag_id} not found for update")
            return None

        updates = {
            key: value
            for key, value in changes.items()
            if key in UPDATABLE_TAG_FIELDS
            and (value is not None or key in NULLABLE_TAG_FIELDS)
        }

        # Business rule: a rename must not collide with any other tag
        new_name = updates.get("name")
        if new_name is not None and new_name != existing_tag.name:
            duplicate_tag = await self._tag_repository.get_by_name(db_session, new_name)
            if duplicate_tag and duplicate_tag.id != tag_id:
                logger.warning(f"Cannot rename tag {tag_id}: '{new_name}' is taken")
                raise DuplicateNameError(
                    f"Another tag with name '{new_name}' already exists"
                )

        updated_tag = existing_tag.with_changes(**updates)
        saved_tag = await self._tag_repository.save(db_session, updated_tag)
        logger.info(f"Updated tag {tag_id}: {sorted(updates)}")
        return saved_tag

    async def delete_tag(self, db_session: Session, tag_id: UUID) -> Optional[TagEntity]:
        """Delete a tag, softly if users still reference it.

        A tag referenced by at least one user (hidden users included) is
        deactivated and kept; an unreferenced tag is removed.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (UUID): The unique identifier of the tag to delete.

        Returns:
            Optional[TagEntity]: The deactivated tag, the removed tag, or None
            if the tag does not exist.

        Example:
            >>> with get_db_session() as db:
            ...     tag = await service.delete_tag(db, referenced_tag_id)
            ...     print(tag.is_active)
            False
        """
        if await self._user_repository.any_with_tag(db_session, tag_id):
            existing_tag = await self._tag_repository.get_by_id(db_session, tag_id)
            if not existing_tag:
                return None

            deactivated_tag = await self._tag_repository.save(
                db_session, existing_tag.deactivated()
            )
            logger.info(f"Tag {tag_id} is still referenced, soft deleted")
            return deactivated_tag

        removed_tag = await self._tag_repository.delete(db_session, tag_id)
        if removed_tag:
            logger.info(f"Tag {tag_id} removed")
        else:
            logger.warning(f"Tag {tag_id} not found for deletion")
        return removed_tag

    async def search_tags(
        self, db_session: Session, query: str, page: PageRequest
    ) -> Page[TagEntity]:
        """Search active tags by name, description or category.

        Args:
            db_session (Session): Fresh database session for this operation.
            query (str): Case-insensitive substring to look for.
            page (PageRequest): Requested page window.

        Returns:
            Page[TagEntity]: Matching tags ordered by name.
        """
        tags, total = await self._tag_repository.search_active(db_session, query, page)
        logger.debug(f"Tag search '{query}' matched {total} tags")
        return Page.build(tags, total, page)
