"""Request parsing helpers shared by the REST routers."""

from typing import Optional
from uuid import UUID

from domain.entities.pagination import PageRequest
from fastapi import HTTPException, status
from utils.config import DEFAULT_PAGE, DEFAULT_PAGE_SIZE


def parse_positive_int(value: Optional[str], default: int) -> int:
    """Parse a query parameter as a positive integer.

    Args:
        value (Optional[str]): Raw query parameter value.
        default (int): Value used when the parameter is absent, non-numeric
            or lower than 1.

    Returns:
        int: The parsed value or the default.

    Example:
        >>> parse_positive_int("abc", 10)
        10
    """
    if value is None:
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 1 else default


def parse_page_request(page: Optional[str], page_size: Optional[str]) -> PageRequest:
    """Build a page window from raw ``page`` and ``pageSize`` query parameters."""
    return PageRequest(
        page=parse_positive_int(page, DEFAULT_PAGE),
        page_size=parse_positive_int(page_size, DEFAULT_PAGE_SIZE),
    )


def parse_uuid(value: str, label: str = "ID") -> UUID:
    """Parse a path parameter as a UUID.

    Args:
        value (str): Raw path parameter.
        label (str): Name used in the error message.

    Returns:
        UUID: The parsed identifier.

    Raises:
        HTTPException: 400 if the value is not a well-formed UUID.
    """
    try:
        return UUID(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} format: {value}",
        ) from e
