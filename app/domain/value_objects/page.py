"""Pagination value objects."""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageParams:
    """Page request parameters."""

    page: int = 0
    size: int = 10
    sort_by: str = "createdAt"
    direction: str = "desc"
    search: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate page parameters."""
        if self.page < 0:
            raise ValueError("Page index cannot be negative")
        if not 1 <= self.size <= 100:
            raise ValueError("Page size must be between 1 and 100")
        if self.direction not in ("asc", "desc"):
            raise ValueError("Sort direction must be 'asc' or 'desc'")

    def to_query(self, **filters: Any) -> dict[str, Any]:
        """
        Build query parameters, omitting empty values.

        Args:
            **filters: Extra filters (e.g. status) to include

        Returns:
            Query parameter dictionary
        """
        params: dict[str, Any] = {
            "page": self.page,
            "size": self.size,
            "sortBy": self.sort_by,
            "direction": self.direction,
            "search": self.search,
        }
        params.update(filters)
        return {key: value for key, value in params.items() if value not in (None, "")}


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a paginated listing."""

    content: list[T] = field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    size: int = 10
    number: int = 0

    @property
    def first(self) -> bool:
        return self.number == 0

    @property
    def last(self) -> bool:
        return self.number + 1 >= self.total_pages

    @property
    def empty(self) -> bool:
        return not self.content

    @classmethod
    def from_items(cls, items: list[T], params: PageParams) -> "Page[T]":
        """
        Slice a full result list into the requested page.

        Args:
            items: Complete, already filtered and sorted list
            params: Page request parameters

        Returns:
            Page holding the requested slice
        """
        start = params.page * params.size
        total_pages = (len(items) + params.size - 1) // params.size
        return cls(
            content=items[start : start + params.size],
            total_elements=len(items),
            total_pages=total_pages,
            size=params.size,
            number=params.page,
        )
