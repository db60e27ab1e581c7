"""Paginated response DTO."""

from typing import Any, Generic, TypeVar

from app.application.dtos.base import DTO
from app.domain.value_objects.page import Page

ItemT = TypeVar("ItemT")


class PageResponse(DTO, Generic[ItemT]):
    """Backend-compatible page envelope."""

    content: list[ItemT]
    total_elements: int
    total_pages: int
    size: int
    number: int
    first: bool
    last: bool
    empty: bool

    @classmethod
    def from_page(cls, page: Page[Any], item_model: type) -> "PageResponse":
        """
        Build the envelope from a domain page.

        Args:
            page: Domain page of entities
            item_model: DTO class each entity is converted to

        Returns:
            PageResponse with converted content
        """
        return cls(
            content=[item_model.model_validate(item) for item in page.content],
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            size=page.size,
            number=page.number,
            first=page.first,
            last=page.last,
            empty=page.empty,
        )
