"""Tag output schemas for API responses.

This module contains Pydantic models for tag-related API responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from application.rest.schemas.output.common_output import PaginationInfo


class TagResponse(BaseModel):
    """Schema for tag data in API responses.

    Attributes:
        id (str): UUID string identifier of the tag.
        name (str): The name of the tag.
        description (Optional[str]): Free text describing the tag.
        category (Optional[str]): Grouping label for the tag.
        created_at (Optional[datetime]): Creation timestamp.
        is_active (bool): False once the tag has been soft deleted.

    Example:
        >>> tag_response = TagResponse(id="tag-uuid-123", name="python", is_active=True)
    """

    id: str  # UUID as string
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    is_active: bool = True


class TagsListResponse(BaseModel):
    """Schema for a page of tags.

    Attributes:
        tags (List[TagResponse]): Tags on the requested page.
        pagination (PaginationInfo): Pagination metadata.
    """

    tags: List[TagResponse]
    pagination: PaginationInfo


class TagPopularityResponse(BaseModel):
    tag_id: str
    count: int


class TagDeleteResponse(BaseModel):
    """Schema for the outcome of a tag deletion.

    Attributes:
        message (str): Human readable outcome.
        tag (TagResponse): The deactivated or removed tag.
        soft_deleted (bool): True if the tag was kept and deactivated
            because users still reference it.
    """

    message: str
    tag: TagResponse
    soft_deleted: bool
