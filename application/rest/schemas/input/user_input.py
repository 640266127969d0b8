"""User input schemas for API requests.

This module contains Pydantic models for registration, profile updates,
visibility changes, login and tagging requests.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for registering a new user.

    Password length and email format are validated by the domain service,
    which reports them as 400 errors.

    Attributes:
        name (str): Unique user name.
        birth_date (date): Date of birth in ISO format.
        email (str): Unique email address.
        password (str): Plaintext password, at least 8 characters.
        is_admin (bool): Administrative flag.
        is_hidden (bool): Visibility flag.

    Example:
        >>> user_data = UserCreate(
        ...     name="alice",
        ...     birth_date="1990-05-17",
        ...     email="alice@example.com",
        ...     password="secret-password"
        ... )
    """

    name: str = Field(..., description="User name, unique")
    birth_date: date = Field(..., description="Date of birth")
    email: str = Field(..., description="Email address, unique")
    password: str = Field(..., description="Password, at least 8 characters")
    is_admin: bool = False
    is_hidden: bool = False


class UserUpdate(BaseModel):
    """Schema for a partial user profile update."""

    name: Optional[str] = None
    birth_date: Optional[date] = None
    email: Optional[str] = None
    password: Optional[str] = None
    is_admin: Optional[bool] = None
    is_hidden: Optional[bool] = None


class UserVisibilityUpdate(BaseModel):
    is_hidden: bool = Field(..., description="Whether the user is hidden")


class LoginRequest(BaseModel):
    """Schema for a login attempt.

    Attributes:
        email (str): Email address of the user.
        password (str): Plaintext password.
    """

    email: str
    password: str


class TagIdsInput(BaseModel):
    """Schema for attaching existing tags to a user.

    Attributes:
        tag_ids (List[str]): UUID strings of the tags, at least one.

    Example:
        >>> payload = TagIdsInput(tag_ids=["123e4567-e89b-12d3-a456-426614174000"])
    """

    tag_ids: List[str] = Field(..., min_length=1, description="Tag UUIDs")


class TagNamesInput(BaseModel):
    """Schema for tagging a user by tag names, creating missing tags.

    Attributes:
        names (List[str]): Exact tag names, at least one.
    """

    names: List[str] = Field(..., min_length=1, description="Tag names")
