"""Mapping of the ``tags`` table.

Only the SQLAlchemy repositories touch TagORM; services and routers work
with TagEntity.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid

from infrastructure.models.base import Base


class TagORM(Base):
    """Row of the ``tags`` table.

    Attributes:
        id (UUID): Generated on insert.
        name (str): Unbounded length. The unique index covers inactive
            tags as well, so a soft deleted tag keeps its name reserved.
        description (str): Free text, nullable.
        category (str): Grouping label, nullable. ``user-generated`` for tags
            created while tagging a user by name.
        created_at (datetime): Insert time (UTC).
        is_active (bool): Cleared by a soft delete.

    Example:
        >>> db.add(TagORM(name="python", category="language"))
        >>> db.commit()
    """

    __tablename__ = "tags"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Tag identifier",
    )

    name = Column(
        String,
        unique=True,
        nullable=False,
        comment="Exact, case-sensitive tag name",
    )

    description = Column(Text, nullable=True, comment="Optional tag description")

    category = Column(String, nullable=True, comment="Optional tag category")

    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="Insert time (UTC)",
    )

    # Soft delete flag; referenced tags are never removed
    is_active = Column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
        comment="False once the tag is soft deleted",
    )

    def __repr__(self) -> str:
        return f"<TagORM(id={self.id}, name='{self.name}', is_active={self.is_active})>"

    def __str__(self) -> str:
        return self.name
