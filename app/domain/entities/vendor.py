"""Vendor entity."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VendorStatus(str, Enum):
    """Vendor activation status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


VENDOR_REQUIRED_FIELDS = (
    "legal_name",
    "business_name",
    "email",
    "phone_number",
    "street_number",
    "street_name",
    "postal_code",
)


@dataclass
class Vendor:
    """Onboarded business partner."""

    id: str
    vendor_unique_id: str
    legal_name: str
    business_name: str
    email: str = ""
    phone_number: str = ""
    street_number: str = ""
    street_name: str = ""
    apt_unit_bldg: str = ""
    postal_code: str = ""
    status: VendorStatus = VendorStatus.ACTIVE
    lead_id: Optional[str] = None

    @property
    def toggled_status(self) -> VendorStatus:
        """Status the vendor would have after an activate/deactivate toggle."""
        if self.status == VendorStatus.ACTIVE:
            return VendorStatus.INACTIVE
        return VendorStatus.ACTIVE
