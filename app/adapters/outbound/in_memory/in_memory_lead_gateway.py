"""In-memory lead gateway that behaves like the TreadX backend."""

import copy
from datetime import datetime, timezone
from typing import Optional

from app.adapters.outbound.in_memory.backend_store import InMemoryBackendStore
from app.application.dtos.lead import InitiateContactRequest, LeadRequest, LeadValidationRequest
from app.application.ports.lead_gateway import LeadGateway
from app.domain.entities.lead import Lead, LeadSource, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.errors import NotFound, ValidationFailed
from app.domain.policies.lead_lifecycle import (
    LeadAction,
    decision_action,
    ensure_allowed,
    ensure_contact_payload,
    ensure_decision_payload,
    ensure_transition,
    missing_lead_fields,
)
from app.domain.value_objects.page import Page, PageParams
from app.domain.value_objects.role_id import MANAGEMENT_ROLES

LEAD_SEARCH_FIELDS = ("business_name", "phone_number", "notes")


class InMemoryLeadGateway(LeadGateway):
    """In-memory implementation of the lead gateway.

    Acts as the authoritative server: every mutation re-checks role, payload
    and state guard regardless of what the caller already checked. Returned
    leads are copies, so callers only ever see response snapshots.
    """

    def __init__(self, store: Optional[InMemoryBackendStore] = None) -> None:
        """
        Initialize in-memory lead gateway.

        Args:
            store: Shared backend store (a fresh one if omitted)
        """
        self._store = store or InMemoryBackendStore()

    @property
    def store(self) -> InMemoryBackendStore:
        return self._store

    def _find(self, lead_id: str) -> Lead:
        lead = self._store.leads.get(str(lead_id))
        if lead is None:
            raise NotFound("lead", lead_id)
        return lead

    @staticmethod
    def _require_fields(request: LeadRequest) -> None:
        errors = missing_lead_fields(request.field_values())
        if errors:
            raise ValidationFailed(errors)

    @staticmethod
    def _modified_by(lead: Lead, session: UserSession) -> None:
        lead.last_modified_by = session.user_id
        lead.last_modified_by_name = session.display_name
        lead.touch()

    async def create_lead(self, session: UserSession, request: LeadRequest) -> Lead:
        ensure_allowed(session, LeadAction.CREATE)
        self._require_fields(request)

        lead = Lead(
            id=self._store.next_lead_id(),
            business_name=request.business_name,
            phone_number=request.phone_number,
            street_number=request.street_number,
            street_name=request.street_name,
            apt_unit_bldg=request.apt_unit_bldg,
            postal_code=request.postal_code,
            source=request.source or LeadSource.GOVERNMENT,
            source_url=request.source_url,
            notes=request.notes,
            uploaded_file=request.uploaded_file,
            status=LeadStatus.PENDING,
            added_by=session.user_id,
            added_by_name=session.display_name,
            added_by_manager=session.has_any_role(MANAGEMENT_ROLES),
        )
        self._store.leads[lead.id] = lead
        return copy.deepcopy(lead)

    async def get_lead(self, session: UserSession, lead_id: str) -> Lead:
        ensure_allowed(session, LeadAction.VIEW)
        return copy.deepcopy(self._find(lead_id))

    async def list_leads(self, session: UserSession, params: PageParams) -> Page[Lead]:
        ensure_allowed(session, LeadAction.VIEW)
        page = self._store.paginate(list(self._store.leads.values()), params, LEAD_SEARCH_FIELDS)
        return copy.deepcopy(page)

    async def get_leads_by_status(
        self, session: UserSession, status: LeadStatus, params: PageParams
    ) -> Page[Lead]:
        ensure_allowed(session, LeadAction.VIEW)
        page = self._store.paginate(
            list(self._store.leads.values()),
            params,
            LEAD_SEARCH_FIELDS,
            predicate=lambda lead: lead.status == status,
        )
        return copy.deepcopy(page)

    async def get_my_leads(
        self,
        session: UserSession,
        params: PageParams,
        status: Optional[LeadStatus] = None,
    ) -> Page[Lead]:
        ensure_allowed(session, LeadAction.VIEW)

        def mine(lead: Lead) -> bool:
            owned = session.user_id in (lead.added_by, lead.assigned_to)
            return owned and (status is None or lead.status == status)

        page = self._store.paginate(
            list(self._store.leads.values()), params, LEAD_SEARCH_FIELDS, predicate=mine
        )
        return copy.deepcopy(page)

    async def update_lead(self, session: UserSession, lead_id: str, request: LeadRequest) -> Lead:
        ensure_allowed(session, LeadAction.UPDATE)
        self._require_fields(request)
        lead = self._find(lead_id)
        ensure_transition(session, lead, LeadAction.UPDATE)

        lead.business_name = request.business_name
        lead.phone_number = request.phone_number
        lead.street_number = request.street_number
        lead.street_name = request.street_name
        lead.apt_unit_bldg = request.apt_unit_bldg
        lead.postal_code = request.postal_code
        lead.source = request.source or lead.source
        lead.source_url = request.source_url
        lead.notes = request.notes
        if request.uploaded_file is not None:
            lead.uploaded_file = request.uploaded_file
        self._modified_by(lead, session)
        return copy.deepcopy(lead)

    async def validate_lead(
        self, session: UserSession, lead_id: str, request: LeadValidationRequest
    ) -> Lead:
        action = decision_action(request.status)
        ensure_allowed(session, action)
        ensure_decision_payload(request.status, request.notes)
        lead = self._find(lead_id)
        ensure_transition(session, lead, action)

        lead.status = request.status
        if request.notes and request.notes.strip():
            lead.notes = request.notes
        lead.validated_at = datetime.now(timezone.utc)
        lead.validated_by = session.user_id
        lead.validated_by_name = session.display_name
        self._modified_by(lead, session)
        return copy.deepcopy(lead)

    async def initiate_contact(
        self, session: UserSession, lead_id: str, request: InitiateContactRequest
    ) -> Lead:
        ensure_allowed(session, LeadAction.INITIATE_CONTACT)
        ensure_contact_payload(request.contact_method, request.contact_method_details)
        lead = self._find(lead_id)
        ensure_transition(session, lead, LeadAction.INITIATE_CONTACT)

        lead.status = LeadStatus.CONTACTED
        lead.contact_method = request.contact_method
        lead.contact_method_details = request.contact_method_details
        lead.contact_name = request.contact_name or None
        lead.position = request.position or None
        lead.extension_number = request.extension_number or None
        self._modified_by(lead, session)
        return copy.deepcopy(lead)

    async def take_lead(self, session: UserSession, lead_id: str) -> Lead:
        ensure_allowed(session, LeadAction.TAKE)
        lead = self._find(lead_id)
        ensure_transition(session, lead, LeadAction.TAKE)

        lead.assigned_to = session.user_id
        lead.assigned_to_name = session.display_name
        lead.assigned_at = datetime.now(timezone.utc)
        self._modified_by(lead, session)
        return copy.deepcopy(lead)

    async def delete_lead(self, session: UserSession, lead_id: str) -> None:
        ensure_allowed(session, LeadAction.DELETE)
        self._find(lead_id)
        del self._store.leads[str(lead_id)]
