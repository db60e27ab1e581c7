"""Vendor conversion workflow: CONTACTED lead to vendor."""

from typing import Any, Callable, Optional

from app.application.dtos.vendor import VendorRequest
from app.application.ports.lead_gateway import LeadGateway
from app.application.ports.transition_lock import TransitionLock
from app.application.ports.vendor_gateway import VendorGateway
from app.application.use_cases.in_flight import in_flight
from app.application.use_cases.manage_vendors import vendor_payload_errors
from app.application.use_cases.user_messages import UserMessages
from app.domain.entities.lead import Lead, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import Vendor, VendorStatus
from app.domain.errors import SalesConsoleError, ValidationFailed
from app.domain.policies.lead_lifecycle import LeadAction, ensure_allowed, ensure_transition
from app.domain.policies.vendor_permissions import VendorAction, ensure_vendor_allowed
from app.domain.value_objects.page import Page, PageParams


def draft_from_lead(lead: Lead) -> VendorRequest:
    """
    Pre-fill a vendor request from a lead. Never mutates the lead.

    Args:
        lead: Source lead

    Returns:
        Vendor draft with names, phone and address copied and a blank email
    """
    return VendorRequest(
        lead_id=lead.id,
        legal_name=lead.business_name,
        business_name=lead.business_name,
        email="",
        phone_number=lead.phone_number,
        street_number=lead.street_number,
        street_name=lead.street_name,
        apt_unit_bldg=lead.apt_unit_bldg,
        postal_code=lead.postal_code,
        status=VendorStatus.ACTIVE,
    )


class ConvertLeadToVendor:
    """Use case for turning a CONTACTED lead into a vendor.

    The lead itself is never written here: creating the vendor with a
    ``lead_id`` is what makes the backend advance the lead.
    """

    def __init__(
        self,
        lead_gateway: LeadGateway,
        vendor_gateway: VendorGateway,
        transition_lock: TransitionLock,
        lock_ttl_seconds: int = 60,
        candidate_page_size: int = 5,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize conversion use case.

        Args:
            lead_gateway: Gateway to the lead persistence service
            vendor_gateway: Gateway to the vendor persistence service
            transition_lock: In-flight guard keyed by lead id
            lock_ttl_seconds: Lifetime of an in-flight marker
            candidate_page_size: Page size of the candidate picker
            logger: Optional logger function (user_id, request_id, component, **kwargs)
        """
        self._lead_gateway = lead_gateway
        self._vendor_gateway = vendor_gateway
        self._transition_lock = transition_lock
        self._lock_ttl_seconds = lock_ttl_seconds
        self._candidate_page_size = candidate_page_size
        self._logger = logger

    def _log(self, session: UserSession, request_id: Optional[str], component: str, **kwargs: Any) -> None:
        """Log event if logger is available."""
        if self._logger:
            self._logger(session.user_id, request_id or "unknown", component, **kwargs)

    async def list_candidates(
        self, session: UserSession, page: int = 0, search: Optional[str] = None
    ) -> Page[Lead]:
        """
        List CONTACTED leads that can be converted.

        The backend listing is filtered again locally so that a lead in any
        other status is never offered.

        Args:
            session: Caller session
            page: Zero-based page index
            search: Optional free-text search

        Returns:
            Page of CONTACTED leads
        """
        ensure_allowed(session, LeadAction.CONVERT_TO_VENDOR)
        params = PageParams(page=page, size=self._candidate_page_size, search=search or None)
        result = await self._lead_gateway.get_leads_by_status(session, LeadStatus.CONTACTED, params)

        candidates = [lead for lead in result.content if lead.status == LeadStatus.CONTACTED]
        dropped = len(result.content) - len(candidates)
        return Page(
            content=candidates,
            total_elements=max(0, result.total_elements - dropped),
            total_pages=result.total_pages,
            size=result.size,
            number=result.number,
        )

    async def load_draft(self, session: UserSession, lead_id: str) -> tuple[Lead, VendorRequest]:
        """
        Load a lead and build its vendor draft.

        Raises:
            PermissionDenied: If the caller has no sales role
            NotFound: If the lead does not exist
            Conflict: If the lead is not CONTACTED or is already converted
        """
        ensure_allowed(session, LeadAction.CONVERT_TO_VENDOR)
        lead = await self._lead_gateway.get_lead(session, lead_id)
        ensure_transition(session, lead, LeadAction.CONVERT_TO_VENDOR)
        return lead, draft_from_lead(lead)

    async def convert(
        self, session: UserSession, request: VendorRequest, request_id: Optional[str] = None
    ) -> Vendor:
        """
        Create the vendor for a CONTACTED lead.

        Exactly one vendor creation call is issued. If it fails the lead is
        left CONTACTED and the error is re-raised unchanged.

        Args:
            session: Caller session
            request: Vendor payload carrying the source ``lead_id``
            request_id: Optional request identifier for logging

        Returns:
            Created vendor

        Raises:
            PermissionDenied: If the caller has no sales role
            ValidationFailed: If the payload is incomplete or names no lead
            NotFound: If the lead does not exist
            Conflict: If the lead is not CONTACTED or a conversion is in flight
        """
        try:
            ensure_allowed(session, LeadAction.CONVERT_TO_VENDOR)
            ensure_vendor_allowed(session, VendorAction.CREATE)
            errors = vendor_payload_errors(request.field_values())
            if not request.lead_id:
                errors["lead_id"] = UserMessages.LEAD_SELECTION_REQUIRED
            if errors:
                raise ValidationFailed(errors)

            async with in_flight(
                self._transition_lock, "lead", request.lead_id, self._lock_ttl_seconds
            ):
                lead = await self._lead_gateway.get_lead(session, request.lead_id)
                ensure_transition(session, lead, LeadAction.CONVERT_TO_VENDOR)
                vendor = await self._vendor_gateway.create_vendor(session, request)
        except SalesConsoleError as exc:
            self._log(
                session,
                request_id,
                "rejection",
                action=LeadAction.CONVERT_TO_VENDOR.value,
                entity_id=request.lead_id,
                kind=exc.kind,
                reason=exc.message,
            )
            raise

        self._log(
            session,
            request_id,
            "lifecycle",
            action=LeadAction.CONVERT_TO_VENDOR.value,
            entity_id=lead.id,
            status_before=lead.status.value,
            vendor_id=vendor.id,
            vendor_unique_id=vendor.vendor_unique_id,
        )
        return vendor
