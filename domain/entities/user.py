"""User domain entity for the user tags service.

This module contains the User domain entity and the helpers that
derive values from it (age) or validate registration data.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

if TYPE_CHECKING:
    from domain.entities.tag import TagEntity

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8

_EPOCH = datetime(1970, 1, 1)


def calculate_age(birth_date: date, now: Optional[datetime] = None) -> int:
    """Calculate age in whole years from a birth date.

    The elapsed time is laid on top of the Unix epoch and the year offset
    is read back, so the result can be off by one close to a birthday in
    leap-year ranges. Birth dates in the future yield a positive value;
    the absolute elapsed time is used, so any valid date stays in range.

    Args:
        birth_date (date): Date of birth.
        now (Optional[datetime]): Reference time, defaults to current UTC time.

    Returns:
        int: Age in whole years.

    Example:
        >>> calculate_age(date(2000, 6, 15), datetime(2026, 10, 19))
        26
    """
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    born = datetime(birth_date.year, birth_date.month, birth_date.day)
    return (_EPOCH + abs(now - born)).year - 1970


@dataclass
class UserEntity:
    """Domain entity representing a registered user.

    Attributes:
        id (Optional[UUID]): Unique identifier. None for users not yet persisted.
        name (str): Unique user name.
        birth_date (date): Date of birth.
        email (str): Unique email address.
        password (str): Plaintext password, compared as-is on login.
        is_admin (bool): Administrative flag.
        is_hidden (bool): Hidden users are skipped by public listings and
            cannot log in.
        tag_ids (List[UUID]): Identifiers of the tags attached to the user,
            in attach order and without duplicates.
        age (Optional[int]): Derived age, only populated on detail lookups.
    """

    id: Optional[UUID]
    name: str
    birth_date: date
    email: str
    password: str
    is_admin: bool = False
    is_hidden: bool = False
    tag_ids: List[UUID] = field(default_factory=list)
    age: Optional[int] = None

    def is_new(self) -> bool:
        """Check if the user has not been persisted yet."""
        return self.id is None

    def has_valid_email(self) -> bool:
        """Check the email against the accepted address pattern.

        Returns:
            bool: True if the email looks like ``local@domain.tld``.
        """
        return bool(self.email) and EMAIL_PATTERN.match(self.email) is not None

    def has_strong_password(self) -> bool:
        """Check that the password has at least the minimum length."""
        return len(self.password or "") >= MIN_PASSWORD_LENGTH

    def check_password(self, password: str) -> bool:
        """Compare a candidate password with the stored one.

        Passwords are stored in plaintext, so this is an exact comparison.
        """
        return self.password == password

    def with_age(self, now: Optional[datetime] = None) -> "UserEntity":
        """Return a copy of the user with the derived age populated."""
        return replace(self, age=calculate_age(self.birth_date, now))


@dataclass
class TaggedUser:
    """A user together with its tag references resolved to tag records.

    Attributes:
        user (UserEntity): The user.
        tags (List[TagEntity]): Tags the user's tag ids resolve to. Ids of
            tags that no longer exist are skipped.
    """

    user: UserEntity
    tags: List["TagEntity"]
