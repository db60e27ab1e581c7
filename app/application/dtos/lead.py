"""Lead DTOs."""

from datetime import datetime
from typing import Any, Optional

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from app.application.dtos.base import DTO
from app.domain.entities.lead import ContactMethod, LeadSource, LeadStatus


class LeadRequest(DTO):
    """Payload for creating or updating a lead.

    Presence of required fields is checked by the lifecycle service, not by
    the model, so a partial wizard draft can still be represented.
    """

    business_name: str = ""
    phone_number: str = ""
    street_number: str = ""
    street_name: str = ""
    apt_unit_bldg: str = ""
    postal_code: str = ""
    source: Optional[LeadSource] = None
    source_url: str = ""
    notes: str = ""
    uploaded_file: Optional[str] = None

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "businessName": "City Auto Repair",
                "phoneNumber": "+1 (555) 045-6789",
                "streetNumber": "456",
                "streetName": "Oak Avenue",
                "aptUnitBldg": "",
                "postalCode": "L4C 2N8",
                "source": "ADS",
                "sourceUrl": "https://ads-platform.com/lead/456",
                "notes": "Small auto repair shop",
            }
        },
    )

    def field_values(self) -> dict[str, Any]:
        """Field values keyed by snake_case name."""
        return self.model_dump()


class LeadValidationRequest(DTO):
    """Manager decision on a pending lead."""

    status: LeadStatus
    notes: Optional[str] = None


class InitiateContactRequest(DTO):
    """Outcome of the first contact with an approved lead."""

    contact_method: Optional[ContactMethod] = None
    contact_method_details: str = ""
    contact_name: str = ""
    position: str = ""
    extension_number: str = ""


class LeadResponse(DTO):
    """Lead as exposed to the presentation layer."""

    id: str
    business_name: str
    phone_number: str
    street_number: str
    street_name: str
    apt_unit_bldg: str
    postal_code: str
    source: LeadSource
    source_url: str
    notes: str
    uploaded_file: Optional[str] = None
    status: LeadStatus
    added_by: Optional[str] = None
    added_by_name: Optional[str] = None
    added_by_manager: bool = False
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None
    assigned_at: Optional[datetime] = None
    validated_at: Optional[datetime] = None
    validated_by: Optional[str] = None
    validated_by_name: Optional[str] = None
    contact_method: Optional[ContactMethod] = None
    contact_method_details: Optional[str] = None
    contact_name: Optional[str] = None
    position: Optional[str] = None
    extension_number: Optional[str] = None
    vendor_id: Optional[str] = None
    vendor_unique_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LeadDetailResponse(DTO):
    """Lead plus the actions the caller may perform on it."""

    lead: LeadResponse
    permitted_actions: list[str]
