"""Tag domain entity.

This module contains the Tag domain entity that represents
a tag in the business domain with its rules and behaviors.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional
from uuid import UUID

# Category assigned to tags created implicitly when a user is tagged by name
USER_GENERATED_CATEGORY = "user-generated"


@dataclass(frozen=True)
class TagEntity:
    """Domain entity representing a tag.

    This is an immutable domain object that represents a tag
    with its business rules and constraints.

    Attributes:
        id (Optional[UUID]): Unique identifier for the tag. None for new tags.
        name (str): The display name of the tag, unique across all tags.
        description (Optional[str]): Free text describing the tag.
        category (Optional[str]): Grouping label for the tag.
        created_at (Optional[datetime]): Creation timestamp, set by persistence.
        is_active (bool): False once the tag has been soft deleted.

    Example:
        >>> tag = TagEntity(id=None, name="python", category="language")
        >>> print(tag.is_active)
        True

    Business Rules:
        - Tag name must be non-empty and not only whitespace
        - Tag names are unique, compared exactly (enforced at repository level)
        - Tags still referenced by users are deactivated instead of removed
    """

    id: Optional[UUID]
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    is_active: bool = True

    def __post_init__(self) -> None:
        """Validate tag entity after initialization.

        Raises:
            ValueError: If tag name is empty or contains only whitespace.
        """
        if not self.name or not self.name.strip():
            raise ValueError("Tag name cannot be empty or whitespace")

    def is_new(self) -> bool:
        """Check if this is a new tag (not yet persisted).

        Returns:
            bool: True if the tag has no ID (new), False otherwise.
        """
        return self.id is None

    def with_changes(self, **changes) -> "TagEntity":
        """Create a copy of this tag with the given fields replaced.

        Args:
            **changes: Field values to override.

        Returns:
            TagEntity: A new TagEntity instance, validated again.
        """
        return replace(self, **changes)

    def deactivated(self) -> "TagEntity":
        """Return a soft deleted copy of this tag."""
        return replace(self, is_active=False)


@dataclass(frozen=True)
class TagPopularity:
    """Number of users referencing a tag.

    Attributes:
        tag_id (UUID): Identifier of the referenced tag.
        count (int): How many users hold a reference to it.
    """

    tag_id: UUID
    count: int
