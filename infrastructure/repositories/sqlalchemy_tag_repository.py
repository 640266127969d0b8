"""Tag persistence on top of SQLAlchemy.

Implements TagRepositoryInterface against the ``tags`` table and maps
rows to TagEntity values.
"""

import logging
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from domain.entities.pagination import PageRequest
from domain.entities.tag import TagEntity
from domain.exceptions import DuplicateNameError
from domain.repositories.tag_repository import TagRepositoryInterface
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from infrastructure.models.tag_orm import TagORM

logger = logging.getLogger(__name__)


def _like_pattern(query: str) -> str:
    """Build a LIKE pattern matching ``query`` literally as a substring."""
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SqlAlchemyTagRepository(TagRepositoryInterface):
    """Tag repository backed by the ``tags`` table.

    Writes commit before returning and roll back on any failure. A write
    rejected by the unique index on ``name`` surfaces as DuplicateNameError.

    NOTE: Sessions are passed per call; the repository holds no state.

    Example:
        >>> repository = SqlAlchemyTagRepository()
        >>> tags, total = await repository.list_active(db, PageRequest(1, 10))
        >>> print(total)
        15
    """

    async def get_by_id(self, db_session: Session, tag_id: UUID) -> Optional[TagEntity]:
        row = self._get_model(db_session, tag_id)
        return self._model_to_entity(row) if row else None

    async def get_by_ids(
        self, db_session: Session, tag_ids: Sequence[UUID]
    ) -> List[TagEntity]:
        """Resolve identifiers in one query, keeping the caller's order.

        Args:
            db_session (Session): Session for this call.
            tag_ids (Sequence[UUID]): Identifiers to resolve.

        Returns:
            List[TagEntity]: The tags found; unknown identifiers are skipped.
        """
        if not tag_ids:
            return []

        rows = db_session.query(TagORM).filter(TagORM.id.in_(list(tag_ids))).all()
        by_id = {row.id: row for row in rows}
        return [
            self._model_to_entity(by_id[tag_id]) for tag_id in tag_ids if tag_id in by_id
        ]

    async def get_by_name(self, db_session: Session, name: str) -> Optional[TagEntity]:
        row = db_session.query(TagORM).filter(TagORM.name == name).first()
        return self._model_to_entity(row) if row else None

    async def list_active(
        self, db_session: Session, page: PageRequest
    ) -> Tuple[List[TagEntity], int]:
        active = db_session.query(TagORM).filter(TagORM.is_active)
        return self._paginate(active, page)

    async def search_active(
        self, db_session: Session, query: str, page: PageRequest
    ) -> Tuple[List[TagEntity], int]:
        """Case-insensitive substring search over name, description and category.

        Args:
            db_session (Session): Session for this call.
            query (str): Text to look for. LIKE wildcards are escaped.
            page (PageRequest): Requested page window.

        Returns:
            Tuple[List[TagEntity], int]: Matching active tags on the page and
            the total number of matches.
        """
        pattern = _like_pattern(query)
        matches = db_session.query(TagORM).filter(
            TagORM.is_active,
            or_(
                TagORM.name.ilike(pattern, escape="\\"),
                TagORM.description.ilike(pattern, escape="\\"),
                TagORM.category.ilike(pattern, escape="\\"),
            ),
        )
        return self._paginate(matches, page)

    async def save(self, db_session: Session, tag: TagEntity) -> TagEntity:
        """Insert or overwrite a tag row and commit.

        An entity carrying an id that is not in the table is inserted
        with that id.

        Args:
            db_session (Session): Session for this call.
            tag (TagEntity): Tag to persist.

        Returns:
            TagEntity: The stored tag as read back after the commit.

        Raises:
            DuplicateNameError: If another row already has this name.
        """
        try:
            row = None if tag.is_new() else self._get_model(db_session, tag.id)
            if row is None:
                row = TagORM(id=tag.id) if tag.id else TagORM()
                db_session.add(row)

            row.name = tag.name
            row.description = tag.description
            row.category = tag.category
            row.is_active = tag.is_active

            db_session.commit()
            db_session.refresh(row)
            return self._model_to_entity(row)

        except IntegrityError as e:
            db_session.rollback()
            logger.warning(f"Tag name '{tag.name}' rejected by unique constraint")
            raise DuplicateNameError(f"Tag with name '{tag.name}' already exists") from e
        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to save tag '{tag.name}': {str(e)}")
            raise

    async def delete(self, db_session: Session, tag_id: UUID) -> Optional[TagEntity]:
        try:
            row = self._get_model(db_session, tag_id)
            if row is None:
                return None

            removed = self._model_to_entity(row)
            db_session.delete(row)
            db_session.commit()
            return removed

        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to delete tag {tag_id}: {str(e)}")
            raise

    def _get_model(self, db_session: Session, tag_id: UUID) -> Optional[TagORM]:
        return db_session.query(TagORM).filter(TagORM.id == tag_id).first()

    def _paginate(self, base_query, page: PageRequest) -> Tuple[List[TagEntity], int]:
        total = base_query.count()
        rows = (
            base_query.order_by(TagORM.name.asc())
            .offset(page.offset)
            .limit(page.limit)
            .all()
        )
        return [self._model_to_entity(row) for row in rows], total

    def _model_to_entity(self, row: TagORM) -> TagEntity:
        return TagEntity(
            id=row.id,
            name=row.name,
            description=row.description,
            category=row.category,
            created_at=row.created_at,
            is_active=row.is_active,
        )
