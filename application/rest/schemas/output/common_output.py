"""Response models shared by the tag, user and health routers."""

from typing import Any, Optional

from domain.entities.pagination import Page
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every non-2xx response, as produced by HTTPException.

    Attributes:
        detail (str): Human readable reason.
        error_code (str, optional): Machine readable category, when known.
    """

    detail: str
    error_code: Optional[str] = None


class MessageResponse(BaseModel):
    """Outcome message with an optional payload, e.g. after deleting a user.

    Example:
        >>> MessageResponse(message="User deleted successfully", data={"id": "..."})
    """

    message: str
    data: Optional[Any] = None


class HealthResponse(BaseModel):
    status: str
    service: str


class PaginationInfo(BaseModel):
    """Metadata attached to every paginated listing.

    Attributes:
        current_page (int): Requested page, starting at 1.
        total_pages (int): ceil(total / page_size); 0 for an empty result.
        total (int): Number of matching records over all pages.
        page_size (int): Records per page.
        has_next (bool): True if current_page < total_pages.
        has_previous (bool): True if current_page > 1.
    """

    current_page: int
    total_pages: int
    total: int
    page_size: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_page(cls, page: Page) -> "PaginationInfo":
        return cls(
            current_page=page.current_page,
            total_pages=page.total_pages,
            total=page.total,
            page_size=page.page_size,
            has_next=page.has_next,
            has_previous=page.has_previous,
        )
