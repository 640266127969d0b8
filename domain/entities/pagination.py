"""Pagination domain entities.

This module contains the value objects used by every paginated query:
the requested page window and the resulting page of records.
"""

import math
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """Requested page window for an offset-paginated query.

    Attributes:
        page: Page number (1-based)
        page_size: Number of records per page
    """

    page: int = 1
    page_size: int = 10

    def __post_init__(self):
        """Validate the page window after initialization."""
        if self.page < 1:
            raise ValueError("Page number must be at least 1")
        if self.page_size < 1:
            raise ValueError("Page size must be at least 1")

    @property
    def offset(self) -> int:
        """Calculate the offset for database pagination."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


@dataclass
class Page(Generic[T]):
    """One page of query results with its pagination metadata.

    Attributes:
        items: Records on this page
        total: Total number of matching records across all pages
        current_page: The page number that was requested
        page_size: Number of records per page
        total_pages: ceil(total / page_size), 0 when nothing matched
    """

    items: List[T]
    total: int
    current_page: int
    page_size: int
    total_pages: int = field(default=0)

    @classmethod
    def build(cls, items: List[T], total: int, request: PageRequest) -> "Page[T]":
        """Create a page from query results and the request that produced them.

        Args:
            items: Records returned for the requested window
            total: Total number of matching records
            request: The page window that was queried

        Returns:
            Page: Page with calculated total_pages
        """
        return cls(
            items=list(items),
            total=total,
            current_page=request.page,
            page_size=request.page_size,
            total_pages=math.ceil(total / request.page_size),
        )

    @classmethod
    def empty(cls, request: PageRequest) -> "Page[T]":
        """Create an empty page for the given request."""
        return cls.build([], 0, request)

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1
