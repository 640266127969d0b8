from typing import List, Optional

from application.converters.tag_converter import TagConverter
from application.converters.user_converter import UserConverter
from application.rest.schemas.input.tag_input import TagCreate, TagUpdate
from application.rest.schemas.output.common_output import ErrorResponse
from application.rest.schemas.output.tag_output import (
    TagDeleteResponse,
    TagPopularityResponse,
    TagResponse,
    TagsListResponse,
)
from application.rest.schemas.output.user_output import UsersListResponse
from application.utils import parse_page_request, parse_positive_int, parse_uuid
from domain.exceptions import DuplicateNameError
from domain.services.association_service import AssociationService
from domain.services.tag_service import TagService
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from utils.config import DEFAULT_POPULAR_LIMIT
from utils.dependencies import get_association_service, get_db, get_tag_service

router = APIRouter()

TAG_NOT_FOUND_EXAMPLE = {
    "application/json": {
        "example": {"detail": "Tag with ID 123e4567-e89b-12d3-a456-426614174000 not found"}
    }
}
INVALID_UUID_EXAMPLE = {
    "application/json": {"example": {"detail": "Invalid tag ID format: invalid-id"}}
}


@router.post(
    path="/tags",
    description="Create a new tag. Tag names are unique and matched exactly.",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_201_CREATED: {
            "model": TagResponse,
            "description": "Tag created successfully.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid tag data or tag already exists.",
            "content": {
                "application/json": {
                    "example": {"detail": "Tag with name 'python' already exists"}
                }
            },
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - tag creation failed.",
            "content": {
                "application/json": {"example": {"detail": "Failed to create tag."}}
            },
        },
    },
)
async def create_tag(
    tag_create: TagCreate,
    db: Session = Depends(get_db),
    tag_service: TagService = Depends(get_tag_service),
) -> TagResponse:
    """Create a new tag with domain business rule validation.

    Args:
        tag_create (TagCreate): Pydantic schema containing tag creation data.
        db (Session): Fresh database session for this request.
        tag_service (TagService): Domain service with injected repositories.

    Returns:
        TagResponse: Created tag response schema.

    Raises:
        HTTPException: 400 if tag already exists or invalid data.
        HTTPException: 500 if internal server errors occur.
    """
    try:
        created_entity = await tag_service.create_tag(
            db,
            tag_create.name,
            description=tag_create.description,
            category=tag_create.category,
            is_active=tag_create.is_active,
        )
        return TagConverter.entity_to_response(created_entity)
    except (DuplicateNameError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create tag",
        ) from e


@router.get(
    path="/tags",
    description="Retrieve active tags ordered by name, one page at a time.",
    response_model=TagsListResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": TagsListResponse,
            "description": "Page of active tags.",
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - database connection failed.",
            "content": {
                "application/json": {"example": {"detail": "Failed to retrieve tags"}}
            },
        },
    },
)
async def list_tags(
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    db: Session = Depends(get_db),
    tag_service: TagService = Depends(get_tag_service),
) -> TagsListResponse:
    """List active tags.

    Args:
        page (Optional[str]): Page number, defaults to 1 when absent or invalid.
        page_size (Optional[str]): Page size, defaults to 10 when absent or invalid.
        db (Session): Fresh database session for this request.
        tag_service (TagService): Domain service with injected repositories.

    Returns:
        TagsListResponse: Tags on the page with pagination info.

    Example:
        >>> response = await list_tags("2", "10", db, tag_service)
        >>> print(response.pagination.total_pages)
        2
    """
    page_request = parse_page_request(page, page_size)
    try:
        tags_page = await tag_service.list_tags(db, page_request)
        return TagConverter.page_to_response(tags_page)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve tags",
        ) from e


@router.get(
    path="/tags/search",
    description="Search active tags by name, description or category (case-insensitive).",
    response_model=TagsListResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": TagsListResponse,
            "description": "Page of matching tags.",
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - search failed.",
        },
    },
)
async def search_tags(
    q: str = Query("", description="Text to search for"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    db: Session = Depends(get_db),
    tag_service: TagService = Depends(get_tag_service),
) -> TagsListResponse:
    page_request = parse_page_request(page, page_size)
    try:
        tags_page = await tag_service.search_tags(db, q, page_request)
        return TagConverter.page_to_response(tags_page)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search tags",
        ) from e


@router.get(
    path="/tags/popular",
    description="Rank tags by the number of users referencing them.",
    response_model=List[TagPopularityResponse],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": List[TagPopularityResponse],
            "description": "Tag ids with their usage counts, most used first.",
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - aggregation failed.",
        },
    },
)
async def popular_tags(
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    association_service: AssociationService = Depends(get_association_service),
) -> List[TagPopularityResponse]:
    """Get the most used tags.

    Args:
        limit (Optional[str]): Maximum number of entries, defaults to 10.
        db (Session): Fresh database session for this request.
        association_service (AssociationService): Domain service for the association.

    Returns:
        List[TagPopularityResponse]: Tag ids with counts.
    """
    try:
        popularity = await association_service.popular_tags(
            db, parse_positive_int(limit, DEFAULT_POPULAR_LIMIT)
        )
        return TagConverter.popularity_to_responses(popularity)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute popular tags",
        ) from e


@router.get(
    path="/tags/by-name/{tag_name}/users",
    description="Retrieve visible users holding the tag with the given exact name.",
    response_model=UsersListResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": UsersListResponse,
            "description": "Page of users. Empty when no tag has this name.",
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - user lookup failed.",
        },
    },
)
async def get_users_by_tag_name(
    tag_name: str,
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    db: Session = Depends(get_db),
    association_service: AssociationService = Depends(get_association_service),
) -> UsersListResponse:
    page_request = parse_page_request(page, page_size)
    try:
        users_page = await association_service.find_users_by_tag_name(
            db, tag_name, page_request
        )
        return UserConverter.page_to_response(users_page)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve users for tag",
        ) from e


@router.get(
    path="/tags/{tag_id}",
    description="Retrieve a specific tag by its unique identifier, active or not.",
    response_model=TagResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": TagResponse,
            "description": "Tag retrieved successfully.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid UUID format.",
            "content": INVALID_UUID_EXAMPLE,
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "Tag not found.",
            "content": TAG_NOT_FOUND_EXAMPLE,
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - tag retrieval failed.",
        },
    },
)
async def get_tag_by_id(
    tag_id: str,
    db: Session = Depends(get_db),
    tag_service: TagService = Depends(get_tag_service),
) -> TagResponse:
    """Get a specific tag by its unique identifier.

    Args:
        tag_id (str): String representation of the tag UUID.
        db (Session): Fresh database session for this request.
        tag_service (TagService): Domain service with injected repositories.

    Returns:
        TagResponse: Tag response schema.

    Raises:
        HTTPException: 400 if UUID format is invalid.
        HTTPException: 404 if tag not found.
        HTTPException: 500 if internal server errors occur.
    """
    tag_uuid = parse_uuid(tag_id, "tag ID")
    try:
        tag_entity = await tag_service.get_tag(db, tag_uuid)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve tag",
        ) from e

    if not tag_entity:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tag with ID {tag_id} not found",
        )
    return TagConverter.entity_to_response(tag_entity)


@router.put(
    path="/tags/{tag_id}",
    description="Partially update a tag. Only fields present in the body are changed.",
    response_model=TagResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": TagResponse,
            "description": "Tag updated successfully.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid UUID format or tag name already exists.",
            "content": {
                "application/json": {
                    "example": {"detail": "Another tag with name 'python' already exists"}
                }
            },
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "Tag not found.",
            "content": TAG_NOT_FOUND_EXAMPLE,
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - tag update failed.",
        },
    },
)
async def update_tag(
    tag_id: str,
    tag_update: TagUpdate,
    db: Session = Depends(get_db),
    tag_service: TagService = Depends(get_tag_service),
) -> TagResponse:
    """Update an existing tag.

    Args:
        tag_id (str): String representation of the tag UUID.
        tag_update (TagUpdate): Fields to change.
        db (Session): Fresh database session for this request.
        tag_service (TagService): Domain service with injected repositories.

    Returns:
        TagResponse: Updated tag response schema.

    Raises:
        HTTPException: 400 if UUID format is invalid or tag name already exists.
        HTTPException: 404 if tag not found.
        HTTPException: 500 if internal server errors occur.
    """
    tag_uuid = parse_uuid(tag_id, "tag ID")
    try:
        updated_entity = await tag_service.update_tag(
            db, tag_uuid, tag_update.model_dump(exclude_unset=True)
        )
    except (DuplicateNameError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update tag",
        ) from e

    if not updated_entity:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tag with ID {tag_id} not found",
        )
    return TagConverter.entity_to_response(updated_entity)


@router.delete(
    path="/tags/{tag_id}",
    description="Delete a tag. Tags still referenced by users are deactivated instead.",
    response_model=TagDeleteResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": TagDeleteResponse,
            "description": "Tag removed or deactivated.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid UUID format.",
            "content": INVALID_UUID_EXAMPLE,
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "Tag not found.",
            "content": TAG_NOT_FOUND_EXAMPLE,
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - tag deletion failed.",
        },
    },
)
async def delete_tag(
    tag_id: str,
    db: Session = Depends(get_db),
    tag_service: TagService = Depends(get_tag_service),
) -> TagDeleteResponse:
    """Delete a tag by its unique identifier.

    Args:
        tag_id (str): String representation of the tag UUID.
        db (Session): Fresh database session for this request.
        tag_service (TagService): Domain service with injected repositories.

    Returns:
        TagDeleteResponse: Outcome message, tag and soft deletion flag.

    Raises:
        HTTPException: 400 if UUID format is invalid.
        HTTPException: 404 if tag not found.
        HTTPException: 500 if internal server errors occur.
    """
    tag_uuid = parse_uuid(tag_id, "tag ID")
    try:
        deleted_entity = await tag_service.delete_tag(db, tag_uuid)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete tag",
        ) from e

    if not deleted_entity:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tag with ID {tag_id} not found",
        )
    return TagConverter.deletion_to_response(deleted_entity)


@router.get(
    path="/tags/{tag_id}/users",
    description="Retrieve visible users holding a tag, ordered by name.",
    response_model=UsersListResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": UsersListResponse,
            "description": "Page of users holding the tag.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid UUID format.",
            "content": INVALID_UUID_EXAMPLE,
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - user lookup failed.",
        },
    },
)
async def get_users_by_tag(
    tag_id: str,
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    db: Session = Depends(get_db),
    association_service: AssociationService = Depends(get_association_service),
) -> UsersListResponse:
    tag_uuid = parse_uuid(tag_id, "tag ID")
    page_request = parse_page_request(page, page_size)
    try:
        users_page = await association_service.find_users_by_tag(
            db, tag_uuid, page_request
        )
        return UserConverter.page_to_response(users_page)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve users for tag",
        ) from e
