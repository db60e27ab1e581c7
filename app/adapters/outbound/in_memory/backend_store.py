"""Shared state of the in-memory TreadX backend."""

import re
from itertools import count
from typing import Any, Callable, Optional, TypeVar

from app.domain.entities.lead import Lead
from app.domain.entities.vendor import Vendor
from app.domain.value_objects.page import Page, PageParams

T = TypeVar("T")


def _attribute_name(sort_by: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", sort_by).lower()


class InMemoryBackendStore:
    """Leads and vendors held by the in-memory backend.

    Both in-memory gateways share one store so that a vendor creation can
    advance its source lead in the same operation.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self.leads: dict[str, Lead] = {}
        self.vendors: dict[str, Vendor] = {}
        self._lead_ids = count(1)
        self._vendor_ids = count(1)

    def next_lead_id(self) -> str:
        return str(next(self._lead_ids))

    def next_vendor_ids(self, business_name: str) -> tuple[str, str]:
        """
        Allocate a vendor id and its human-readable unique id.

        Args:
            business_name: Vendor business name, used for the unique id prefix

        Returns:
            Tuple of (id, vendor unique id such as "VND-CITY-001")
        """
        sequence = next(self._vendor_ids)
        letters = re.sub(r"[^A-Za-z]", "", business_name).upper()[:4].ljust(4, "X")
        return str(sequence), f"VND-{letters}-{sequence:03d}"

    @staticmethod
    def paginate(
        items: list[T],
        params: PageParams,
        search_fields: tuple[str, ...],
        predicate: Optional[Callable[[T], bool]] = None,
        query: Optional[str] = None,
    ) -> Page[T]:
        """
        Filter, search, sort and slice a list the way the backend does.

        Args:
            items: All candidate records
            params: Page, sort and search parameters
            search_fields: Attributes matched case-insensitively by the search text
            predicate: Optional extra filter
            query: Search text overriding ``params.search``

        Returns:
            Requested page
        """
        selected = [item for item in items if predicate is None or predicate(item)]

        text = (query if query is not None else params.search or "").strip().lower()
        if text:
            selected = [
                item
                for item in selected
                if any(text in str(getattr(item, name, "") or "").lower() for name in search_fields)
            ]

        attribute = _attribute_name(params.sort_by)

        def sort_key(item: Any) -> tuple[bool, Any]:
            value = getattr(item, attribute, None)
            return (value is None, value if value is not None else "")

        selected.sort(key=sort_key, reverse=params.direction == "desc")
        return Page.from_items(selected, params)
