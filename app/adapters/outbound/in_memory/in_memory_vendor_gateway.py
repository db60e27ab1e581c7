"""In-memory vendor gateway that behaves like the TreadX backend."""

import copy
from typing import Optional

from app.adapters.outbound.in_memory.backend_store import InMemoryBackendStore
from app.application.dtos.vendor import VendorRequest
from app.application.ports.vendor_gateway import VendorGateway
from app.domain.entities.lead import LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import VENDOR_REQUIRED_FIELDS, Vendor, VendorStatus
from app.domain.errors import Conflict, NotFound, ValidationFailed
from app.domain.policies.lead_lifecycle import LeadAction, ensure_allowed, guard_violation
from app.domain.policies.vendor_permissions import VendorAction, ensure_vendor_allowed
from app.domain.value_objects.page import Page, PageParams

VENDOR_SEARCH_FIELDS = ("legal_name", "business_name", "email", "phone_number")


class InMemoryVendorGateway(VendorGateway):
    """In-memory implementation of the vendor gateway.

    A creation carrying a ``lead_id`` checks the lead first and, once the
    vendor exists, moves the lead to ONBOARDED and links both ids before
    returning. Nothing is written when a check fails.
    """

    def __init__(self, store: Optional[InMemoryBackendStore] = None) -> None:
        """
        Initialize in-memory vendor gateway.

        Args:
            store: Backend store shared with the lead gateway
        """
        self._store = store or InMemoryBackendStore()

    @property
    def store(self) -> InMemoryBackendStore:
        return self._store

    def _find(self, vendor_id: str) -> Vendor:
        vendor = self._store.vendors.get(str(vendor_id))
        if vendor is None:
            raise NotFound("vendor", vendor_id)
        return vendor

    @staticmethod
    def _require_fields(request: VendorRequest) -> None:
        values = request.field_values()
        errors = {
            name: f"{name.replace('_', ' ').capitalize()} is required"
            for name in VENDOR_REQUIRED_FIELDS
            if not str(values.get(name) or "").strip()
        }
        if errors:
            raise ValidationFailed(errors)

    async def create_vendor(self, session: UserSession, request: VendorRequest) -> Vendor:
        ensure_vendor_allowed(session, VendorAction.CREATE)
        self._require_fields(request)

        lead = None
        if request.lead_id is not None:
            ensure_allowed(session, LeadAction.CONVERT_TO_VENDOR)
            lead = self._store.leads.get(str(request.lead_id))
            if lead is None:
                raise NotFound("lead", request.lead_id)
            reason = guard_violation(lead, LeadAction.CONVERT_TO_VENDOR)
            if reason is not None:
                raise Conflict(reason)

        vendor_id, unique_id = self._store.next_vendor_ids(request.business_name)
        vendor = Vendor(
            id=vendor_id,
            vendor_unique_id=unique_id,
            legal_name=request.legal_name,
            business_name=request.business_name,
            email=request.email,
            phone_number=request.phone_number,
            street_number=request.street_number,
            street_name=request.street_name,
            apt_unit_bldg=request.apt_unit_bldg,
            postal_code=request.postal_code,
            status=request.status,
            lead_id=lead.id if lead else None,
        )
        self._store.vendors[vendor.id] = vendor

        if lead is not None:
            lead.status = LeadStatus.ONBOARDED
            lead.vendor_id = vendor.id
            lead.vendor_unique_id = vendor.vendor_unique_id
            lead.last_modified_by = session.user_id
            lead.last_modified_by_name = session.display_name
            lead.touch()
        return copy.deepcopy(vendor)

    async def get_vendor(self, session: UserSession, vendor_id: str) -> Vendor:
        ensure_vendor_allowed(session, VendorAction.VIEW)
        return copy.deepcopy(self._find(vendor_id))

    async def list_vendors(
        self,
        session: UserSession,
        params: PageParams,
        status: Optional[VendorStatus] = None,
    ) -> Page[Vendor]:
        ensure_vendor_allowed(session, VendorAction.VIEW)
        page = self._store.paginate(
            list(self._store.vendors.values()),
            params,
            VENDOR_SEARCH_FIELDS,
            predicate=None if status is None else (lambda vendor: vendor.status == status),
        )
        return copy.deepcopy(page)

    async def search_vendors(
        self, session: UserSession, query: str, params: PageParams
    ) -> Page[Vendor]:
        ensure_vendor_allowed(session, VendorAction.VIEW)
        page = self._store.paginate(
            list(self._store.vendors.values()),
            params,
            VENDOR_SEARCH_FIELDS,
            query=query,
        )
        return copy.deepcopy(page)

    async def update_vendor(
        self, session: UserSession, vendor_id: str, request: VendorRequest
    ) -> Vendor:
        ensure_vendor_allowed(session, VendorAction.UPDATE)
        self._require_fields(request)
        vendor = self._find(vendor_id)
        if request.status != vendor.status:
            ensure_vendor_allowed(session, VendorAction.TOGGLE_STATUS)

        vendor.legal_name = request.legal_name
        vendor.business_name = request.business_name
        vendor.email = request.email
        vendor.phone_number = request.phone_number
        vendor.street_number = request.street_number
        vendor.street_name = request.street_name
        vendor.apt_unit_bldg = request.apt_unit_bldg
        vendor.postal_code = request.postal_code
        vendor.status = request.status
        return copy.deepcopy(vendor)

    async def delete_vendor(self, session: UserSession, vendor_id: str) -> None:
        ensure_vendor_allowed(session, VendorAction.DELETE)
        self._find(vendor_id)
        del self._store.vendors[str(vendor_id)]
