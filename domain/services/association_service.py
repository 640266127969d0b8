"""Association domain service.

This module contains the AssociationService that manages the many-to-many
relation between users and tags: attaching and detaching tags, resolving
a user's tags, the cross queries between the two, and tag popularity.
"""

import logging
from collections import Counter
from typing import List, Sequence, Union
from uuid import UUID

from domain.entities.pagination import Page, PageRequest
from domain.entities.tag import USER_GENERATED_CATEGORY, TagEntity, TagPopularity
from domain.entities.user import TaggedUser, UserEntity
from domain.exceptions import InvalidTagIdError, TagNotFoundError, UserNotFoundError
from domain.repositories.tag_repository import TagRepositoryInterface
from domain.repositories.user_repository import UserRepositoryInterface
from domain.services.tag_service import TagService
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

TagIdLike = Union[str, UUID]


def parse_tag_id(tag_id: TagIdLike) -> UUID:
    """Parse a caller supplied tag identifier.

    Args:
        tag_id (TagIdLike): A UUID or its string form.

    Returns:
        UUID: The parsed identifier.

    Raises:
        InvalidTagIdError: If the value is not a well-formed UUID.
    """
    if isinstance(tag_id, UUID):
        return tag_id
    try:
        return UUID(str(tag_id))
    except (ValueError, TypeError, AttributeError) as e:
        raise InvalidTagIdError(f"Invalid tag ID: {tag_id}", tag_id=tag_id) from e


class AssociationService:
    """Domain service for the user/tag association.

    A user owns an ordered set of tag references. Attaching validates that
    every referenced tag exists (active or not), while reads resolve the
    references back to tag records and skip ids whose tag has since been
    removed.

    Attributes:
        _tag_repository (TagRepositoryInterface): Repository for tag data access.
        _user_repository (UserRepositoryInterface): Repository for user data access.
        _tag_service (TagService): Used to create tags when tagging by name.

    Example:
        >>> service = AssociationService(tag_repository, user_repository, tag_service)
        >>> with get_db_session() as db:
        ...     tagged = await service.attach_tags_by_name(db, user_id, ["python"])
        ...     print([tag.name for tag in tagged.tags])
        ['python']
    """

    def __init__(
        self,
        tag_repository: TagRepositoryInterface,
        user_repository: UserRepositoryInterface,
        tag_service: TagService,
    ) -> None:
        self._tag_repository = tag_repository
        self._user_repository = user_repository
        self._tag_service = tag_service

    async def attach_tags_by_id(
        self, db_session: Session, user_id: UUID, tag_ids: Sequence[TagIdLike]
    ) -> TaggedUser:
        """Add tags to a user's tag set.

        Every id is validated in input order before the user is looked up.
        Ids already in the set and repeated ids in the input are kept once.

        Args:
            db_session (Session): Fresh database session for this operation.
            user_id (UUID): The user to tag.
            tag_ids (Sequence[TagIdLike]): Identifiers of existing tags.

        Returns:
            TaggedUser: The user with its tags resolved.

        Raises:
            InvalidTagIdError: If an id is not a well-formed UUID.
            TagNotFoundError: If no tag has one of the ids.
            UserNotFoundError: If the user does not exist.
        """
        resolved_ids: List[UUID] = []
        for raw_id in tag_ids:
            tag_id = parse_tag_id(raw_id)
            tag = await self._tag_repository.get_by_id(db_session, tag_id)
            if not tag:
                logger.warning(f"Cannot tag user {user_id}: tag {tag_id} not found")
                raise TagNotFoundError(f"Tag with ID {tag_id} not found", tag_id=tag_id)
            resolved_ids.append(tag_id)

        user = await self._user_repository.add_tags(db_session, user_id, resolved_ids)
        if not user:
            logger.warning(f"Cannot tag user {user_id}: user not found")
            raise UserNotFoundError(f"User with ID {user_id} not found")

        logger.info(f"Attached {len(set(resolved_ids))} tags to user {user_id}")
        return await self._tagged(db_session, user)

    async def attach_tags_by_name(
        self, db_session: Session, user_id: UUID, tag_names: Sequence[str]
    ) -> TaggedUser:
        """Add tags to a user by name, creating the missing ones.

        Missing tags are created in the user-generated category. Each creation
        is committed on its own, so tags created before a later failure stay
        persisted.

        Args:
            db_session (Session): Fresh database session for this operation.
            user_id (UUID): The user to tag.
            tag_names (Sequence[str]): Exact tag names.

        Returns:
            TaggedUser: The user with its tags resolved.

        Raises:
            UserNotFoundError: If the user does not exist.
            DuplicateNameError: If a concurrent request created the same name.
        """
        tag_ids: List[UUID] = []
        for name in tag_names:
            tag = await self._tag_service.get_tag_by_name(db_session, name)
            if not tag:
                tag = await self._tag_service.create_tag(
                    db_session,
                    name,
                    description="",
                    category=USER_GENERATED_CATEGORY,
                )
                logger.info(f"Created user-generated tag '{name}' with ID {tag.id}")
            tag_ids.append(tag.id)

        return await self.attach_tags_by_id(db_session, user_id, tag_ids)

    async def detach_tag(
        self, db_session: Session, user_id: UUID, tag_id: UUID
    ) -> TaggedUser:
        """Remove a tag from a user's tag set. Absent tags are ignored.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self._user_repository.remove_tag(db_session, user_id, tag_id)
        if not user:
            raise UserNotFoundError(f"User with ID {user_id} not found")

        logger.info(f"Detached tag {tag_id} from user {user_id}")
        return await self._tagged(db_session, user)

    async def list_user_tags(self, db_session: Session, user_id: UUID) -> List[TagEntity]:
        user = await self._user_repository.get_by_id(db_session, user_id)
        if not user:
            raise UserNotFoundError(f"User with ID {user_id} not found")
        return await self._tag_repository.get_by_ids(db_session, user.tag_ids)

    async def find_users_by_tag(
        self, db_session: Session, tag_id: UUID, page: PageRequest
    ) -> Page[UserEntity]:
        """Retrieve visible users holding a tag, ordered by name.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_id (UUID): The tag to look for.
            page (PageRequest): Requested page window.

        Returns:
            Page[UserEntity]: Matching users.
        """
        users, total = await self._user_repository.find_visible_by_tag(
            db_session, tag_id, page
        )
        return Page.build(users, total, page)

    async def find_users_by_tag_name(
        self, db_session: Session, tag_name: str, page: PageRequest
    ) -> Page[UserEntity]:
        """Same as find_users_by_tag, with the tag given by its exact name.

        An unknown name yields an empty page rather than an error.
        """
        tag = await self._tag_repository.get_by_name(db_session, tag_name)
        if not tag:
            logger.info(f"No tag named '{tag_name}', returning empty page")
            return Page.empty(page)
        return await self.find_users_by_tag(db_session, tag.id, page)

    async def find_users_by_all_tags(
        self, db_session: Session, tag_ids: Sequence[UUID], page: PageRequest
    ) -> Page[UserEntity]:
        """Retrieve users holding every one of the given tags.

        Hidden users are included and listed after visible ones. An empty
        set of tags matches no user.

        Args:
            db_session (Session): Fresh database session for this operation.
            tag_ids (Sequence[UUID]): Required tags.
            page (PageRequest): Requested page window.

        Returns:
            Page[UserEntity]: Matching users.
        """
        users, total = await self._user_repository.find_with_all_tags(
            db_session, tag_ids, page
        )
        return Page.build(users, total, page)

    async def popular_tags(
        self, db_session: Session, limit: int = 10
    ) -> List[TagPopularity]:
        """Rank tags by the number of users referencing them.

        Every reference of every user is scanned, hidden users included.
        Tags with equal counts keep the order in which they were first
        attached.

        Args:
            db_session (Session): Fresh database session for this operation.
            limit (int): Maximum number of entries to return.

        Returns:
            List[TagPopularity]: Tag ids with their counts, most used first.
        """
        references = await self._user_repository.list_tag_references(db_session)
        counts = Counter(references)
        return [
            TagPopularity(tag_id=tag_id, count=count)
            for tag_id, count in counts.most_common(max(limit, 0))
        ]

    async def _tagged(self, db_session: Session, user: UserEntity) -> TaggedUser:
        tags = await self._tag_repository.get_by_ids(db_session, user.tag_ids)
        return TaggedUser(user=user, tags=tags)
