"""Lead entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class LeadStatus(str, Enum):
    """Lead pipeline status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"
    CONTACTED = "CONTACTED"
    ONBOARDED = "ONBOARDED"
    DONE = "DONE"


class LeadSource(str, Enum):
    """Where a lead came from."""

    GOVERNMENT = "GOVERNMENT"
    ADS = "ADS"


class ContactMethod(str, Enum):
    """How a lead was contacted."""

    PHONE = "PHONE"
    MAIL_EMAIL = "MAIL_EMAIL"
    TEXT = "TEXT"
    OTHER = "OTHER"


# Statuses in which a lead carries contact-outcome fields
CONTACTED_STATUSES = frozenset({LeadStatus.CONTACTED, LeadStatus.ONBOARDED, LeadStatus.DONE})
VALIDATED_STATUSES = frozenset({LeadStatus.APPROVED, LeadStatus.DENIED})

# Fields a lead must carry to be created or updated
LEAD_REQUIRED_FIELDS = (
    "business_name",
    "phone_number",
    "street_number",
    "street_name",
    "postal_code",
    "source",
)


@dataclass
class Lead:
    """Prospective business moving through the sales pipeline."""

    id: str
    business_name: str
    phone_number: str
    street_number: str = ""
    street_name: str = ""
    apt_unit_bldg: str = ""
    postal_code: str = ""
    source: LeadSource = LeadSource.GOVERNMENT
    source_url: str = ""
    notes: str = ""
    uploaded_file: Optional[str] = None
    status: LeadStatus = LeadStatus.PENDING
    # Ownership and lifecycle
    added_by: Optional[str] = None
    added_by_name: Optional[str] = None
    added_by_manager: bool = False
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None
    assigned_at: Optional[datetime] = None
    validated_at: Optional[datetime] = None
    validated_by: Optional[str] = None
    validated_by_name: Optional[str] = None
    last_modified_by: Optional[str] = None
    last_modified_by_name: Optional[str] = None
    # Contact outcome, set by the contact transition only
    contact_method: Optional[ContactMethod] = None
    contact_method_details: Optional[str] = None
    contact_name: Optional[str] = None
    position: Optional[str] = None
    extension_number: Optional[str] = None
    # Conversion link
    vendor_id: Optional[str] = None
    vendor_unique_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now(timezone.utc)

    @property
    def is_validated(self) -> bool:
        """Whether the lead currently holds a manager's decision."""
        return self.status in VALIDATED_STATUSES

    @property
    def has_contact(self) -> bool:
        return self.contact_method is not None

    @property
    def is_converted(self) -> bool:
        return self.vendor_id is not None

    def contact_fields_consistent(self) -> bool:
        """
        Check that contact fields are present exactly when the status requires them.

        Returns:
            True if contact_method is set iff the lead is CONTACTED or later
        """
        return self.has_contact == (self.status in CONTACTED_STATUSES)
