import logging
from typing import List, Optional

from application.converters.tag_converter import TagConverter
from application.converters.user_converter import UserConverter
from application.rest.schemas.input.user_input import (
    LoginRequest,
    TagIdsInput,
    TagNamesInput,
    UserCreate,
    UserUpdate,
    UserVisibilityUpdate,
)
from application.rest.schemas.output.common_output import ErrorResponse, MessageResponse
from application.rest.schemas.output.tag_output import TagResponse
from application.rest.schemas.output.user_output import (
    TaggedUserResponse,
    UserCountResponse,
    UserResponse,
    UsersListResponse,
)
from application.utils import parse_page_request, parse_uuid
from domain.exceptions import (
    DuplicateIdentityError,
    DuplicateNameError,
    HiddenUserError,
    InvalidCredentialsError,
    InvalidTagIdError,
    NotFoundError,
    UserNotFoundError,
    WeakPasswordError,
)
from domain.services.association_service import AssociationService
from domain.services.user_service import UserService
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from utils.config import ALLOWED_USER_PAGE_SIZES
from utils.dependencies import get_association_service, get_db, get_user_service

logger = logging.getLogger(__name__)

router = APIRouter()

USER_NOT_FOUND_EXAMPLE = {
    "application/json": {
        "example": {"detail": "User with ID 123e4567-e89b-12d3-a456-426614174000 not found"}
    }
}
INVALID_UUID_EXAMPLE = {
    "application/json": {"example": {"detail": "Invalid user ID format: invalid-id"}}
}


def _user_not_found(user_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"User with ID {user_id} not found",
    )


@router.post(
    path="/users/register",
    description="Register a new user with a unique name and email.",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_201_CREATED: {
            "model": UserResponse,
            "description": "User registered successfully.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Name or email in use, weak password or invalid email.",
            "content": {
                "application/json": {
                    "example": {"detail": "User name or email is already in use"}
                }
            },
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - registration failed.",
        },
    },
)
async def register_user(
    user_create: UserCreate,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Register a new user.

    Args:
        user_create (UserCreate): Registration data.
        db (Session): Fresh database session for this request.
        user_service (UserService): Domain service with injected repository.

    Returns:
        UserResponse: The registered user, without password.

    Raises:
        HTTPException: 400 on duplicate identity, weak password or invalid data.
        HTTPException: 500 if internal server errors occur.
    """
    try:
        created_user = await user_service.create_user(
            db,
            name=user_create.name,
            birth_date=user_create.birth_date,
            email=user_create.email,
            password=user_create.password,
            is_admin=user_create.is_admin,
            is_hidden=user_create.is_hidden,
        )
        return UserConverter.entity_to_response(created_user)
    except (DuplicateIdentityError, WeakPasswordError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user",
        ) from e


@router.get(
    path="/users",
    description="Retrieve all users, visible users first, one page at a time.",
    response_model=UsersListResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": UsersListResponse,
            "description": "Page of users.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Unsupported page size.",
            "content": {
                "application/json": {
                    "example": {"detail": "pageSize must be one of 10, 25, 50"}
                }
            },
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - database connection failed.",
        },
    },
)
async def list_users(
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> UsersListResponse:
    """List users with a restricted set of page sizes.

    Args:
        page (Optional[str]): Page number, defaults to 1 when absent or invalid.
        page_size (Optional[str]): Page size, one of the allowed sizes.
        db (Session): Fresh database session for this request.
        user_service (UserService): Domain service with injected repository.

    Returns:
        UsersListResponse: Users on the page with pagination info.

    Raises:
        HTTPException: 400 if the page size is not allowed.
    """
    page_request = parse_page_request(page, page_size)
    if page_request.page_size not in ALLOWED_USER_PAGE_SIZES:
        allowed = ", ".join(str(size) for size in ALLOWED_USER_PAGE_SIZES)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"pageSize must be one of {allowed}",
        )

    try:
        users_page = await user_service.list_users(db, page_request)
        return UserConverter.page_to_response(users_page)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve users",
        ) from e


@router.get(
    path="/users/count",
    description="Count the users that are not hidden.",
    response_model=UserCountResponse,
    status_code=status.HTTP_200_OK,
)
async def count_users(
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> UserCountResponse:
    try:
        return UserCountResponse(count=await user_service.count_visible(db))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to count users",
        ) from e


@router.get(
    path="/users/by-tags",
    description="Retrieve users holding every one of the given tags, hidden users included.",
    response_model=UsersListResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": UsersListResponse,
            "description": "Page of matching users.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "No tags given or malformed tag ID.",
            "content": {
                "application/json": {
                    "example": {"detail": "At least one tag ID is required"}
                }
            },
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - user lookup failed.",
        },
    },
)
async def get_users_by_tags(
    tags: List[str] = Query(default=[]),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    db: Session = Depends(get_db),
    association_service: AssociationService = Depends(get_association_service),
) -> UsersListResponse:
    """Find users whose tag set contains all the given tags.

    Args:
        tags (List[str]): Tag UUIDs, repeated as ``?tags=a&tags=b``.
        page (Optional[str]): Page number.
        page_size (Optional[str]): Page size.
        db (Session): Fresh database session for this request.
        association_service (AssociationService): Domain service for the association.

    Returns:
        UsersListResponse: Matching users with pagination info.

    Raises:
        HTTPException: 400 if no tag is given or a tag ID is malformed.
    """
    if not tags:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one tag ID is required",
        )
    tag_uuids = [parse_uuid(tag_id, "tag ID") for tag_id in tags]
    page_request = parse_page_request(page, page_size)

    try:
        users_page = await association_service.find_users_by_all_tags(
            db, tag_uuids, page_request
        )
        return UserConverter.page_to_response(users_page)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve users by tags",
        ) from e


@router.post(
    path="/users/login",
    description="Authenticate a user by email and password.",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": UserResponse,
            "description": "Login successful.",
        },
        status.HTTP_401_UNAUTHORIZED: {
            "model": ErrorResponse,
            "description": "Wrong password.",
            "content": {"application/json": {"example": {"detail": "Incorrect password"}}},
        },
        status.HTTP_403_FORBIDDEN: {
            "model": ErrorResponse,
            "description": "User is hidden.",
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "No user with this email.",
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Internal server error - login failed.",
        },
    },
)
async def login(
    login_request: LoginRequest,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Log a user in.

    Args:
        login_request (LoginRequest): Email and password.
        db (Session): Fresh database session for this request.
        user_service (UserService): Domain service with injected repository.

    Returns:
        UserResponse: The authenticated user.

    Raises:
        HTTPException: 404 unknown email, 403 hidden user, 401 wrong password.
    """
    try:
        user = await user_service.login(
            db, login_request.email, login_request.password
        )
        return UserConverter.entity_to_response(user)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except HiddenUserError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to log in",
        ) from e


@router.get(
    path="/users/{user_id}",
    description="Retrieve a user with the derived age.",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": UserResponse,
            "description": "User retrieved successfully.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid UUID format.",
            "content": INVALID_UUID_EXAMPLE,
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "User not found.",
            "content": USER_NOT_FOUND_EXAMPLE,
        },
    },
)
async def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user_uuid = parse_uuid(user_id, "user ID")
    try:
        user = await user_service.get_user(db, user_uuid)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve user",
        ) from e

    if not user:
        raise _user_not_found(user_id)
    return UserConverter.entity_to_response(user)


@router.put(
    path="/users/{user_id}",
    description="Partially update a user's profile.",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": UserResponse,
            "description": "User updated successfully.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid UUID format or name/email already in use.",
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "User not found.",
            "content": USER_NOT_FOUND_EXAMPLE,
        },
    },
)
async def update_user(
    user_id: str,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Update a user's profile fields.

    Args:
        user_id (str): String representation of the user UUID.
        user_update (UserUpdate): Fields to change.
        db (Session): Fresh database session for this request.
        user_service (UserService): Domain service with injected repository.

    Returns:
        UserResponse: The updated user.

    Raises:
        HTTPException: 400 if the name or email collides with another user.
        HTTPException: 404 if the user does not exist.
    """
    user_uuid = parse_uuid(user_id, "user ID")
    try:
        updated_user = await user_service.update_user(
            db, user_uuid, user_update.model_dump(exclude_unset=True)
        )
    except DuplicateIdentityError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user",
        ) from e

    if not updated_user:
        raise _user_not_found(user_id)
    return UserConverter.entity_to_response(updated_user)


@router.delete(
    path="/users/{user_id}",
    description="Delete a user. Tags are left untouched.",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": MessageResponse,
            "description": "User deleted successfully.",
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "User not found.",
            "content": USER_NOT_FOUND_EXAMPLE,
        },
    },
)
async def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    user_uuid = parse_uuid(user_id, "user ID")
    try:
        removed_user = await user_service.delete_user(db, user_uuid)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete user",
        ) from e

    if not removed_user:
        raise _user_not_found(user_id)
    return MessageResponse(
        message="User deleted successfully", data={"id": str(removed_user.id)}
    )


@router.put(
    path="/users/{user_id}/hidden",
    description="Hide or show a user.",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "User not found.",
            "content": USER_NOT_FOUND_EXAMPLE,
        },
    },
)
async def set_user_hidden(
    user_id: str,
    visibility: UserVisibilityUpdate,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user_uuid = parse_uuid(user_id, "user ID")
    try:
        updated_user = await user_service.set_hidden(db, user_uuid, visibility.is_hidden)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user visibility",
        ) from e

    if not updated_user:
        raise _user_not_found(user_id)
    return UserConverter.entity_to_response(updated_user)


@router.get(
    path="/users/{user_id}/tags",
    description="Retrieve the tags of a user in the order they were attached.",
    response_model=List[TagResponse],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "User not found.",
            "content": USER_NOT_FOUND_EXAMPLE,
        },
    },
)
async def get_user_tags(
    user_id: str,
    db: Session = Depends(get_db),
    association_service: AssociationService = Depends(get_association_service),
) -> List[TagResponse]:
    user_uuid = parse_uuid(user_id, "user ID")
    try:
        tags = await association_service.list_user_tags(db, user_uuid)
        return TagConverter.entities_to_responses(tags)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve user tags",
        ) from e


@router.post(
    path="/users/{user_id}/tags",
    description="Attach existing tags to a user. Tags already attached are kept once.",
    response_model=TaggedUserResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": TaggedUserResponse,
            "description": "User with its resolved tags.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Malformed tag ID.",
            "content": {
                "application/json": {"example": {"detail": "Invalid tag ID: not-a-uuid"}}
            },
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "Tag or user not found.",
        },
    },
)
async def attach_tags(
    user_id: str,
    tag_ids_input: TagIdsInput,
    db: Session = Depends(get_db),
    association_service: AssociationService = Depends(get_association_service),
) -> TaggedUserResponse:
    """Attach tags to a user by id.

    Args:
        user_id (str): String representation of the user UUID.
        tag_ids_input (TagIdsInput): Tag UUIDs to attach.
        db (Session): Fresh database session for this request.
        association_service (AssociationService): Domain service for the association.

    Returns:
        TaggedUserResponse: The user with its tags.

    Raises:
        HTTPException: 400 if a tag ID is malformed.
        HTTPException: 404 if a tag or the user does not exist.
    """
    user_uuid = parse_uuid(user_id, "user ID")
    try:
        tagged_user = await association_service.attach_tags_by_id(
            db, user_uuid, tag_ids_input.tag_ids
        )
        return UserConverter.tagged_to_response(tagged_user)
    except InvalidTagIdError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to attach tags",
        ) from e


@router.post(
    path="/users/{user_id}/tags/by-name",
    description="Attach tags to a user by name, creating tags that do not exist yet.",
    response_model=TaggedUserResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": TaggedUserResponse,
            "description": "User with its resolved tags.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid tag name or tag created concurrently.",
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "User not found.",
            "content": USER_NOT_FOUND_EXAMPLE,
        },
    },
)
async def attach_tags_by_name(
    user_id: str,
    tag_names_input: TagNamesInput,
    db: Session = Depends(get_db),
    association_service: AssociationService = Depends(get_association_service),
) -> TaggedUserResponse:
    user_uuid = parse_uuid(user_id, "user ID")
    try:
        tagged_user = await association_service.attach_tags_by_name(
            db, user_uuid, tag_names_input.names
        )
        return UserConverter.tagged_to_response(tagged_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except (DuplicateNameError, ValueError) as e:
        logger.warning(f"Tagging user {user_id} by name failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to attach tags",
        ) from e


@router.delete(
    path="/users/{user_id}/tags/{tag_id}",
    description="Detach a tag from a user. Detaching a tag the user does not hold succeeds.",
    response_model=TaggedUserResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid UUID format.",
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "User not found.",
            "content": USER_NOT_FOUND_EXAMPLE,
        },
    },
)
async def detach_tag(
    user_id: str,
    tag_id: str,
    db: Session = Depends(get_db),
    association_service: AssociationService = Depends(get_association_service),
) -> TaggedUserResponse:
    user_uuid = parse_uuid(user_id, "user ID")
    tag_uuid = parse_uuid(tag_id, "tag ID")
    try:
        tagged_user = await association_service.detach_tag(db, user_uuid, tag_uuid)
        return UserConverter.tagged_to_response(tagged_user)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to detach tag",
        ) from e
