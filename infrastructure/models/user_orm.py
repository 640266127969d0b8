"""SQLAlchemy ORM model for User entity.

This module contains the UserORM class that defines the database schema
for users, including the user-owned collection of tag references.

Classes:
    UserORM: SQLAlchemy model for registered users.

Architecture:
    This ORM model is part of the Infrastructure layer and should only be used by
    SqlAlchemyUserRepository and other infrastructure-specific code.
    Domain code should use UserEntity instead of this ORM model.
"""

import uuid

from sqlalchemy import Boolean, Column, Date, String, Uuid
from sqlalchemy.orm import relationship

from infrastructure.models.associations import UserTagORM
from infrastructure.models.base import Base


class UserORM(Base):
    """SQLAlchemy ORM model for users.

    Attributes:
        id (UUID): Primary key, auto-generated UUID.
        name (str): Unique user name.
        birth_date (date): Date of birth.
        email (str): Unique email address.
        password (str): Plaintext password.
        is_admin (bool): Administrative flag, defaults to False.
        is_hidden (bool): Visibility flag, defaults to False.
        tag_links (List[UserTagORM]): Tag references in attach order.

    Table Schema:
        - Table name: 'users'
        - Primary key: id (UUID)
        - Unique constraints: name, email

    Relationships:
        - tag_links: One-to-many with UserTagORM, deleted with the user
    """

    __tablename__ = "users"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Primary key, auto-generated UUID",
    )

    name = Column(
        String, unique=True, nullable=False, comment="User name, unique"
    )

    birth_date = Column(Date, nullable=False, comment="Date of birth")

    email = Column(
        String, unique=True, nullable=False, comment="Email address, unique"
    )

    # Stored as provided; see UserEntity.check_password
    password = Column(String, nullable=False, comment="Plaintext password")

    is_admin = Column(Boolean, default=False, nullable=False)

    is_hidden = Column(
        Boolean,
        default=False,
        nullable=False,
        index=True,
        comment="Hidden users are excluded from public listings",
    )

    tag_links = relationship(
        UserTagORM,
        order_by=UserTagORM.id,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<UserORM(id={self.id}, name='{self.name}', email='{self.email}')>"

    def __str__(self) -> str:
        return self.name
