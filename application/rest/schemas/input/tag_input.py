"""Tag input schemas for API requests.

This module contains Pydantic models for tag-related API requests,
including tag creation and update operations.
"""

from typing import Optional

from pydantic import BaseModel, Field


class TagCreate(BaseModel):
    """Schema for creating a new tag.

    Attributes:
        name (str): The name of the tag to create. Must be non-empty.
        description (Optional[str]): Free text describing the tag.
        category (Optional[str]): Grouping label for the tag.
        is_active (bool): Whether the tag starts active.

    Example:
        >>> tag_data = TagCreate(name="python", category="language")
        >>> print(tag_data.is_active)
        True
    """

    name: str = Field(..., min_length=1, description="Tag name, unique")
    description: Optional[str] = Field(None, description="Tag description")
    category: Optional[str] = Field(None, description="Tag category")
    is_active: bool = Field(True, description="Whether the tag is active")


class TagUpdate(BaseModel):
    """Schema for a partial tag update.

    Only the fields present in the request body are applied.

    Example:
        >>> tag_update = TagUpdate(description="Programming language")
        >>> print(tag_update.model_dump(exclude_unset=True))
        {'description': 'Programming language'}
    """

    name: Optional[str] = Field(None, min_length=1, description="New tag name")
    description: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None
