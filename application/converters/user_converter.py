"""User converters for transforming domain entities into API schemas.

The password held by the domain entity is dropped here and never reaches
a response.
"""

from typing import List

from domain.entities.pagination import Page
from domain.entities.user import TaggedUser, UserEntity

from application.converters.tag_converter import TagConverter
from application.rest.schemas.output.common_output import PaginationInfo
from application.rest.schemas.output.user_output import (
    TaggedUserResponse,
    UserResponse,
    UsersListResponse,
)


class UserConverter:
    """Converter class for user transformations between layers."""

    @staticmethod
    def entity_to_response(user_entity: UserEntity) -> UserResponse:
        """Convert UserEntity domain object to UserResponse Pydantic schema.

        Args:
            user_entity (UserEntity): Domain entity representing a user.

        Returns:
            UserResponse: Pydantic schema for API response, without password.

        Raises:
            ValueError: If the user entity has no ID (not persisted).
        """
        if user_entity.is_new():
            raise ValueError("Cannot convert new user entity to response (no ID)")

        return UserResponse(
            id=str(user_entity.id),
            name=user_entity.name,
            birth_date=user_entity.birth_date,
            email=user_entity.email,
            is_admin=user_entity.is_admin,
            is_hidden=user_entity.is_hidden,
            tags=[str(tag_id) for tag_id in user_entity.tag_ids],
            age=user_entity.age,
        )

    @staticmethod
    def entities_to_responses(user_entities: List[UserEntity]) -> List[UserResponse]:
        return [UserConverter.entity_to_response(entity) for entity in user_entities]

    @staticmethod
    def page_to_response(page: Page[UserEntity]) -> UsersListResponse:
        return UsersListResponse(
            users=UserConverter.entities_to_responses(page.items),
            pagination=PaginationInfo.from_page(page),
        )

    @staticmethod
    def tagged_to_response(tagged_user: TaggedUser) -> TaggedUserResponse:
        """Convert a user with resolved tags to its response schema.

        Args:
            tagged_user (TaggedUser): User and the tags it references.

        Returns:
            TaggedUserResponse: User and full tag records.
        """
        return TaggedUserResponse(
            user=UserConverter.entity_to_response(tagged_user.user),
            tags=TagConverter.entities_to_responses(tagged_user.tags),
        )
