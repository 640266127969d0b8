"""SQLAlchemy implementation of the user repository.

This module contains the concrete implementation of UserRepositoryInterface
using SQLAlchemy, including the user-owned set of tag references.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from domain.entities.pagination import PageRequest
from domain.entities.user import UserEntity
from domain.exceptions import DuplicateIdentityError
from domain.repositories.user_repository import UserRepositoryInterface
from sqlalchemy import distinct, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from infrastructure.models.associations import UserTagORM
from infrastructure.models.user_orm import UserORM

logger = logging.getLogger(__name__)


class SqlAlchemyUserRepository(UserRepositoryInterface):
    """SQLAlchemy implementation of the user repository.

    Tag references are stored as UserTagORM rows owned by the user. The
    unique constraint on (user_id, tag_id) keeps the set free of
    duplicates even under concurrent writers.

    NOTE: This repository does not store the session internally.
    Each method receives a fresh session to ensure proper transaction management
    and avoid session leaks.
    """

    async def get_by_id(self, db_session: Session, user_id: UUID) -> Optional[UserEntity]:
        user_model = self._get_model(db_session, user_id)
        return self._model_to_entity(user_model) if user_model else None

    async def get_by_email(self, db_session: Session, email: str) -> Optional[UserEntity]:
        user_model = db_session.query(UserORM).filter(UserORM.email == email).first()
        return self._model_to_entity(user_model) if user_model else None

    async def get_by_name_or_email(
        self, db_session: Session, name: str, email: str
    ) -> Optional[UserEntity]:
        user_model = (
            db_session.query(UserORM)
            .filter(or_(UserORM.name == name, UserORM.email == email))
            .first()
        )
        return self._model_to_entity(user_model) if user_model else None

    async def list_users(
        self, db_session: Session, page: PageRequest
    ) -> Tuple[List[UserEntity], int]:
        """Retrieve one page of all users.

        Visible users come first; within each group users are ordered by
        name so that pages are stable.

        Args:
            db_session (Session): Database session.
            page (PageRequest): Requested page window.

        Returns:
            Tuple[List[UserEntity], int]: Users on the page and total count.
        """
        base_query = db_session.query(UserORM)
        return self._paginate(
            base_query, page, UserORM.is_hidden.asc(), UserORM.name.asc()
        )

    async def count_visible(self, db_session: Session) -> int:
        return db_session.query(UserORM).filter(~UserORM.is_hidden).count()

    async def save(self, db_session: Session, user: UserEntity) -> UserEntity:
        """Create or update a user.

        Args:
            db_session (Session): Database session.
            user (UserEntity): The user to persist.

        Returns:
            UserEntity: The persisted user.

        Raises:
            DuplicateIdentityError: If the name or email is already taken.
        """
        try:
            if user.is_new():
                user_model = UserORM()
                db_session.add(user_model)
            else:
                user_model = self._get_model(db_session, user.id)
                if not user_model:
                    user_model = UserORM(id=user.id)
                    db_session.add(user_model)

            user_model.name = user.name
            user_model.birth_date = user.birth_date
            user_model.email = user.email
            user_model.password = user.password
            user_model.is_admin = user.is_admin
            user_model.is_hidden = user.is_hidden

            db_session.commit()
            db_session.refresh(user_model)
            return self._model_to_entity(user_model)

        except IntegrityError as e:
            db_session.rollback()
            logger.warning(
                f"User '{user.name}' <{user.email}> rejected by unique constraint"
            )
            raise DuplicateIdentityError(
                "User name or email is already in use"
            ) from e
        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to save user '{user.name}': {str(e)}")
            raise

    async def delete(self, db_session: Session, user_id: UUID) -> Optional[UserEntity]:
        try:
            user_model = self._get_model(db_session, user_id)
            if not user_model:
                return None

            removed = self._model_to_entity(user_model)
            db_session.delete(user_model)
            db_session.commit()
            return removed

        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to delete user {user_id}: {str(e)}")
            raise

    async def add_tags(
        self, db_session: Session, user_id: UUID, tag_ids: Sequence[UUID]
    ) -> Optional[UserEntity]:
        """Union the given tag ids into the user's tag set.

        Args:
            db_session (Session): Database session.
            user_id (UUID): The user to tag.
            tag_ids (Sequence[UUID]): Identifiers of existing tags.

        Returns:
            Optional[UserEntity]: The updated user, or None if not found.
        """
        try:
            user_model = self._get_model(db_session, user_id)
            if not user_model:
                return None

            present = {link.tag_id for link in user_model.tag_links}
            for tag_id in tag_ids:
                if tag_id in present:
                    continue
                user_model.tag_links.append(UserTagORM(tag_id=tag_id))
                present.add(tag_id)

            db_session.commit()
            db_session.refresh(user_model)
            return self._model_to_entity(user_model)

        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to add tags to user {user_id}: {str(e)}")
            raise

    async def remove_tag(
        self, db_session: Session, user_id: UUID, tag_id: UUID
    ) -> Optional[UserEntity]:
        try:
            user_model = self._get_model(db_session, user_id)
            if not user_model:
                return None

            for link in list(user_model.tag_links):
                if link.tag_id == tag_id:
                    user_model.tag_links.remove(link)

            db_session.commit()
            db_session.refresh(user_model)
            return self._model_to_entity(user_model)

        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to remove tag {tag_id} from user {user_id}: {str(e)}")
            raise

    async def any_with_tag(self, db_session: Session, tag_id: UUID) -> bool:
        link = (
            db_session.query(UserTagORM.id).filter(UserTagORM.tag_id == tag_id).first()
        )
        return link is not None

    async def find_visible_by_tag(
        self, db_session: Session, tag_id: UUID, page: PageRequest
    ) -> Tuple[List[UserEntity], int]:
        """Retrieve visible users referencing a tag, ordered by name.

        Args:
            db_session (Session): Database session.
            tag_id (UUID): The tag to look for.
            page (PageRequest): Requested page window.

        Returns:
            Tuple[List[UserEntity], int]: Users on the page and total count.
        """
        base_query = (
            db_session.query(UserORM)
            .join(UserTagORM, UserTagORM.user_id == UserORM.id)
            .filter(UserTagORM.tag_id == tag_id, ~UserORM.is_hidden)
        )
        return self._paginate(base_query, page, UserORM.name.asc())

    async def find_with_all_tags(
        self, db_session: Session, tag_ids: Sequence[UUID], page: PageRequest
    ) -> Tuple[List[UserEntity], int]:
        """Retrieve users holding every one of the given tags.

        Args:
            db_session (Session): Database session.
            tag_ids (Sequence[UUID]): Required tags. An empty sequence matches nobody.
            page (PageRequest): Requested page window.

        Returns:
            Tuple[List[UserEntity], int]: Users on the page and total count.
        """
        required = list(dict.fromkeys(tag_ids))
        if not required:
            return [], 0

        matching_user_ids = (
            select(UserTagORM.user_id)
            .where(UserTagORM.tag_id.in_(required))
            .group_by(UserTagORM.user_id)
            .having(func.count(distinct(UserTagORM.tag_id)) == len(required))
        )
        base_query = db_session.query(UserORM).filter(
            UserORM.id.in_(matching_user_ids)
        )
        return self._paginate(
            base_query, page, UserORM.is_hidden.asc(), UserORM.name.asc()
        )

    async def list_tag_references(self, db_session: Session) -> List[UUID]:
        rows = db_session.query(UserTagORM.tag_id).order_by(UserTagORM.id.asc()).all()
        return [row.tag_id for row in rows]

    def _get_model(self, db_session: Session, user_id: UUID) -> Optional[UserORM]:
        return db_session.query(UserORM).filter(UserORM.id == user_id).first()

    def _paginate(
        self, base_query, page: PageRequest, *order_by
    ) -> Tuple[List[UserEntity], int]:
        total = base_query.count()
        user_models = (
            base_query.order_by(*order_by).offset(page.offset).limit(page.limit).all()
        )
        return [self._model_to_entity(model) for model in user_models], total

    def _model_to_entity(self, user_model: UserORM) -> UserEntity:
        """Convert SQLAlchemy model to domain entity.

        Args:
            user_model (UserORM): SQLAlchemy user model instance.

        Returns:
            UserEntity: Corresponding domain entity with its tag ids in attach order.
        """
        return UserEntity(
            id=user_model.id,
            name=user_model.name,
            birth_date=user_model.birth_date,
            email=user_model.email,
            password=user_model.password,
            is_admin=user_model.is_admin,
            is_hidden=user_model.is_hidden,
            tag_ids=[link.tag_id for link in user_model.tag_links],
        )
