"""Wire models for TreadX backend payloads."""

from datetime import datetime
from typing import Annotated, Any, ClassVar, Optional, Self

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from app.adapters.outbound.backend_api.date_parsing import parse_backend_datetime
from app.domain.entities.lead import ContactMethod, Lead, LeadSource, LeadStatus
from app.domain.entities.vendor import Vendor, VendorStatus
from app.domain.errors import TransportFailure
from app.domain.value_objects.page import Page


def _as_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


BackendDatetime = Annotated[Optional[datetime], BeforeValidator(parse_backend_datetime)]
BackendId = Annotated[Optional[str], BeforeValidator(_as_id)]
Text = Annotated[str, BeforeValidator(_as_text)]


def _full_name(*parts: Optional[str]) -> Optional[str]:
    name = " ".join(part for part in parts if part)
    return name or None


class WireModel(BaseModel):
    """Base for backend payloads: camelCase on the wire, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    payload_name: ClassVar[str] = "payload"

    @classmethod
    def parse(cls, data: Any) -> Self:
        """
        Validate a decoded response body.

        Raises:
            TransportFailure: If the body does not match the wire model
        """
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise TransportFailure(
                f"Backend returned an unreadable {cls.payload_name}: {exc.error_count()} invalid field(s)"
            ) from exc


class LeadPayload(WireModel):
    """Lead as serialized by the backend."""

    payload_name: ClassVar[str] = "lead"

    id: BackendId
    business_name: Text = ""
    phone_number: Text = ""
    street_number: Text = ""
    street_name: Text = ""
    apt_unit_bldg: Text = ""
    postal_code: Text = ""
    source: LeadSource = LeadSource.GOVERNMENT
    source_url: Text = ""
    notes: Text = ""
    uploaded_file: Optional[str] = None
    status: LeadStatus = LeadStatus.PENDING
    added_by: BackendId = None
    added_by_name: Optional[str] = None
    added_by_manager: bool = False
    assigned_to: BackendId = None
    assigned_to_first_name: Optional[str] = None
    assigned_to_last_name: Optional[str] = None
    assigned_at: BackendDatetime = None
    validated_at: BackendDatetime = None
    validated_by: BackendId = None
    validated_by_first_name: Optional[str] = None
    validated_by_last_name: Optional[str] = None
    last_modified_by: BackendId = None
    last_modified_by_name: Optional[str] = None
    contact_method: Optional[ContactMethod] = None
    contact_method_details: Optional[str] = None
    contact_name: Optional[str] = None
    position: Optional[str] = None
    extension_number: Optional[str] = None
    vendor_id: BackendId = None
    vendor_unique_id: Optional[str] = None
    created_at: BackendDatetime = None
    updated_at: BackendDatetime = None

    def to_entity(self) -> Lead:
        """Convert to the Lead entity."""
        lead = Lead(
            id=self.id or "",
            business_name=self.business_name,
            phone_number=self.phone_number,
            street_number=self.street_number,
            street_name=self.street_name,
            apt_unit_bldg=self.apt_unit_bldg,
            postal_code=self.postal_code,
            source=self.source,
            source_url=self.source_url,
            notes=self.notes,
            uploaded_file=self.uploaded_file,
            status=self.status,
            added_by=self.added_by,
            added_by_name=self.added_by_name,
            added_by_manager=self.added_by_manager,
            assigned_to=self.assigned_to,
            assigned_to_name=_full_name(self.assigned_to_first_name, self.assigned_to_last_name),
            assigned_at=self.assigned_at,
            validated_at=self.validated_at,
            validated_by=self.validated_by,
            validated_by_name=_full_name(self.validated_by_first_name, self.validated_by_last_name),
            last_modified_by=self.last_modified_by,
            last_modified_by_name=self.last_modified_by_name,
            # Blank contact details are how the backend encodes "no contact yet"
            contact_method=self.contact_method,
            contact_method_details=self.contact_method_details or None,
            contact_name=self.contact_name or None,
            position=self.position or None,
            extension_number=self.extension_number or None,
            vendor_id=self.vendor_id,
            vendor_unique_id=self.vendor_unique_id,
        )
        if self.created_at is not None:
            lead.created_at = self.created_at
        if self.updated_at is not None:
            lead.updated_at = self.updated_at
        return lead


class VendorPayload(WireModel):
    """Vendor as serialized by the backend."""

    payload_name: ClassVar[str] = "vendor"

    id: BackendId
    vendor_unique_id: Text = ""
    legal_name: Text = ""
    business_name: Text = ""
    email: Text = ""
    phone_number: Text = ""
    street_number: Text = ""
    street_name: Text = ""
    apt_unit_bldg: Text = ""
    postal_code: Text = ""
    status: VendorStatus = VendorStatus.ACTIVE
    lead_id: BackendId = None

    def to_entity(self) -> Vendor:
        """Convert to the Vendor entity."""
        return Vendor(
            id=self.id or "",
            vendor_unique_id=self.vendor_unique_id,
            legal_name=self.legal_name,
            business_name=self.business_name,
            email=self.email,
            phone_number=self.phone_number,
            street_number=self.street_number,
            street_name=self.street_name,
            apt_unit_bldg=self.apt_unit_bldg,
            postal_code=self.postal_code,
            status=self.status,
            lead_id=self.lead_id,
        )


class PagePayload(WireModel):
    """Backend page envelope with raw items."""

    payload_name: ClassVar[str] = "page"

    content: list[dict[str, Any]] = Field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    size: int = 10
    number: int = 0

    def to_page(self, item_model: type[WireModel]) -> Page:
        """
        Convert to a domain page.

        Args:
            item_model: Wire model of each item (LeadPayload or VendorPayload)

        Returns:
            Page of entities
        """
        return Page(
            content=[item_model.parse(item).to_entity() for item in self.content],
            total_elements=self.total_elements,
            total_pages=self.total_pages,
            size=self.size,
            number=self.number,
        )


class UserProfilePayload(WireModel):
    """Profile returned by ``/api/v1/users/me``."""

    payload_name: ClassVar[str] = "user profile"

    id: BackendId
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    # String or {"name": ...}; normalized when the session is built
    role: Any = None
