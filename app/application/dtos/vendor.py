"""Vendor DTOs."""

from typing import Any, Optional

from app.application.dtos.base import DTO
from app.domain.entities.vendor import VendorStatus


class VendorRequest(DTO):
    """Payload for creating or updating a vendor.

    ``lead_id`` is only meaningful on creation: it names the CONTACTED lead
    the vendor is converted from, so the backend can advance it.
    """

    lead_id: Optional[str] = None
    legal_name: str = ""
    business_name: str = ""
    email: str = ""
    phone_number: str = ""
    street_number: str = ""
    street_name: str = ""
    apt_unit_bldg: str = ""
    postal_code: str = ""
    status: VendorStatus = VendorStatus.ACTIVE

    def field_values(self) -> dict[str, Any]:
        """Field values keyed by snake_case name."""
        return self.model_dump()


class VendorResponse(DTO):
    """Vendor as exposed to the presentation layer."""

    id: str
    vendor_unique_id: str
    legal_name: str
    business_name: str
    email: str
    phone_number: str
    street_number: str
    street_name: str
    apt_unit_bldg: str
    postal_code: str
    status: VendorStatus
