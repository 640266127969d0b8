"""Tag converters for transforming domain entities into API schemas.

This module contains converter functions for transforming tag objects
from the domain layer (entities) to the API layer (Pydantic).
"""

from typing import List

from domain.entities.pagination import Page
from domain.entities.tag import TagEntity, TagPopularity

from application.rest.schemas.output.common_output import PaginationInfo
from application.rest.schemas.output.tag_output import (
    TagDeleteResponse,
    TagPopularityResponse,
    TagResponse,
    TagsListResponse,
)


class TagConverter:
    """Converter class for tag transformations between layers.

    Example:
        >>> tag_response = TagConverter.entity_to_response(tag_entity)
        >>> print(tag_response.id)
        "123e4567-e89b-12d3-a456-426614174000"
    """

    @staticmethod
    def entity_to_response(tag_entity: TagEntity) -> TagResponse:
        """Convert TagEntity domain object to TagResponse Pydantic schema.

        Args:
            tag_entity (TagEntity): Domain entity representing a tag.

        Returns:
            TagResponse: Pydantic schema for API response.

        Raises:
            ValueError: If the tag entity has no ID (not persisted).
        """
        if tag_entity.is_new():
            raise ValueError("Cannot convert new tag entity to response (no ID)")

        return TagResponse(
            id=str(tag_entity.id),
            name=tag_entity.name,
            description=tag_entity.description,
            category=tag_entity.category,
            created_at=tag_entity.created_at,
            is_active=tag_entity.is_active,
        )

    @staticmethod
    def entities_to_responses(tag_entities: List[TagEntity]) -> List[TagResponse]:
        return [TagConverter.entity_to_response(entity) for entity in tag_entities]

    @staticmethod
    def page_to_response(page: Page[TagEntity]) -> TagsListResponse:
        """Convert a domain page of tags to the paginated list schema.

        Args:
            page (Page[TagEntity]): Page of tags with pagination metadata.

        Returns:
            TagsListResponse: Tags and pagination info for API response.
        """
        return TagsListResponse(
            tags=TagConverter.entities_to_responses(page.items),
            pagination=PaginationInfo.from_page(page),
        )

    @staticmethod
    def popularity_to_responses(
        popularity: List[TagPopularity],
    ) -> List[TagPopularityResponse]:
        return [
            TagPopularityResponse(tag_id=str(entry.tag_id), count=entry.count)
            for entry in popularity
        ]

    @staticmethod
    def deletion_to_response(tag_entity: TagEntity) -> TagDeleteResponse:
        """Describe the outcome of a tag deletion.

        A tag that comes back inactive was kept because users still
        reference it.

        Args:
            tag_entity (TagEntity): The tag returned by the deletion.

        Returns:
            TagDeleteResponse: Message, tag and soft deletion flag.
        """
        soft_deleted = not tag_entity.is_active
        message = (
            "Tag is still in use and has been deactivated"
            if soft_deleted
            else "Tag deleted successfully"
        )
        return TagDeleteResponse(
            message=message,
            tag=TagConverter.entity_to_response(tag_entity),
            soft_deleted=soft_deleted,
        )
