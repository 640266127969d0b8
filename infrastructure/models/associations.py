"""Association model for the many-to-many relationship between users and tags.

This module defines the ``user_tags`` association, stored as an association
object so that each reference keeps its attach order.

Tables:
    user_tags: Associates users with tags (many-to-many relationship)

Architecture:
    The association is owned by the user: rows are created and removed
    through ``UserORM.tag_links`` and disappear together with their user.
    Tags are referenced, never owned, so removing a tag does not touch
    this table.
"""

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint, Uuid

from infrastructure.models.base import Base


class UserTagORM(Base):
    """A single tag reference held by a user.

    Attributes:
        id (int): Surrogate key, increasing in attach order.
        user_id (UUID): Owning user.
        tag_id (UUID): Referenced tag. Plain indexed column without a foreign
            key, the tag may be removed while references remain.

    Table Schema:
        - Table name: 'user_tags'
        - Primary key: id (autoincrement)
        - Unique constraint: (user_id, tag_id), a user holds a tag at most once
    """

    __tablename__ = "user_tags"
    __table_args__ = (
        UniqueConstraint("user_id", "tag_id", name="uq_user_tags_user_tag"),
        {"comment": "Association table for many-to-many relationship between users and tags"},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<UserTagORM(user_id={self.user_id}, tag_id={self.tag_id})>"
