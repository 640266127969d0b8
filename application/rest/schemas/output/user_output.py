"""User output schemas for API responses.

This module contains Pydantic models for user-related API responses.
Passwords are never part of a response.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from application.rest.schemas.output.common_output import PaginationInfo
from application.rest.schemas.output.tag_output import TagResponse


class UserResponse(BaseModel):
    """Schema for user data in API responses.

    Attributes:
        id (str): UUID string identifier of the user.
        name (str): User name.
        birth_date (date): Date of birth.
        email (str): Email address.
        is_admin (bool): Administrative flag.
        is_hidden (bool): Visibility flag.
        tags (List[str]): UUID strings of the attached tags, in attach order.
        age (Optional[int]): Derived age, only present on detail lookups.

    Example:
        >>> user_response = UserResponse(
        ...     id="user-uuid-123",
        ...     name="alice",
        ...     birth_date="1990-05-17",
        ...     email="alice@example.com",
        ...     is_admin=False,
        ...     is_hidden=False,
        ...     tags=[]
        ... )
    """

    id: str  # UUID as string
    name: str
    birth_date: date
    email: str
    is_admin: bool
    is_hidden: bool
    tags: List[str]
    age: Optional[int] = None


class TaggedUserResponse(BaseModel):
    """Schema for a user together with its resolved tags."""

    user: UserResponse
    tags: List[TagResponse]


class UsersListResponse(BaseModel):
    """Schema for a page of users.

    Attributes:
        users (List[UserResponse]): Users on the requested page.
        pagination (PaginationInfo): Pagination metadata.
    """

    users: List[UserResponse]
    pagination: PaginationInfo


class UserCountResponse(BaseModel):
    count: int
