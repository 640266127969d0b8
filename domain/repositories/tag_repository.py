"""Contract for tag persistence.

The Tag Store service depends on this interface only; the SQLAlchemy
implementation lives in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from ..entities.pagination import PageRequest
from ..entities.tag import TagEntity


class TagRepositoryInterface(ABC):
    """Persistence operations over tag records.

    Lookups ignore the active flag; only the paginated listing and the
    search are restricted to active tags. Paginated methods return the
    page items together with the total number of matches.

    NOTE: The session is passed on every call and never kept on the
    repository.
    """

    @abstractmethod
    async def get_by_id(self, db_session: Session, tag_id: UUID) -> Optional[TagEntity]:
        pass

    @abstractmethod
    async def get_by_ids(
        self, db_session: Session, tag_ids: Sequence[UUID]
    ) -> List[TagEntity]:
        """Resolve several identifiers at once.

        Args:
            db_session (Session): Session for this call.
            tag_ids (Sequence[UUID]): Identifiers to resolve.

        Returns:
            List[TagEntity]: Tags in the order of ``tag_ids``. Identifiers
            without a tag are left out.
        """
        pass

    @abstractmethod
    async def get_by_name(self, db_session: Session, name: str) -> Optional[TagEntity]:
        """Find the tag whose name equals ``name`` exactly (case-sensitive)."""
        pass

    @abstractmethod
    async def list_active(
        self, db_session: Session, page: PageRequest
    ) -> Tuple[List[TagEntity], int]:
        """One page of active tags, ordered by name."""
        pass

    @abstractmethod
    async def search_active(
        self, db_session: Session, query: str, page: PageRequest
    ) -> Tuple[List[TagEntity], int]:
        """One page of active tags containing ``query``.

        The query is matched literally and case-insensitively against the
        name, the description and the category. Results are ordered by name.
        """
        pass

    @abstractmethod
    async def save(self, db_session: Session, tag: TagEntity) -> TagEntity:
        """Insert a new tag or overwrite an existing one, then commit.

        Args:
            db_session (Session): Session for this call.
            tag (TagEntity): Tag to persist; ``id=None`` means insert.

        Returns:
            TagEntity: The stored tag, with id and created_at filled in.

        Raises:
            DuplicateNameError: If the unique constraint on the name rejects
                the write.
        """
        pass

    @abstractmethod
    async def delete(self, db_session: Session, tag_id: UUID) -> Optional[TagEntity]:
        """Remove a tag and return it, or None when there was nothing to remove."""
        pass
