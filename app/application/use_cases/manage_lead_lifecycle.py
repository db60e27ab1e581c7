"""Lead lifecycle use case: guarded transitions over the lead gateway."""

from typing import Any, Callable, Optional

from app.application.dtos.lead import InitiateContactRequest, LeadRequest, LeadValidationRequest
from app.application.ports.lead_gateway import LeadGateway
from app.application.ports.transition_lock import TransitionLock
from app.application.use_cases.in_flight import in_flight
from app.application.use_cases.wizard_steps import LEAD_WIZARD_STEPS
from app.domain.entities.lead import Lead, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.errors import SalesConsoleError, ValidationFailed
from app.domain.policies.lead_lifecycle import (
    DECISION_ACTIONS,
    LeadAction,
    ensure_allowed,
    ensure_contact_payload,
    ensure_decision_payload,
    ensure_transition,
    permitted_actions,
)
from app.domain.value_objects.page import Page, PageParams
from app.domain.value_objects.role_id import MANAGEMENT_ROLES


def lead_payload_errors(values: dict[str, Any]) -> dict[str, str]:
    """
    Validate a lead payload with the same rules as the lead wizard.

    Args:
        values: Field name to value mapping (snake_case names)

    Returns:
        Field name to message mapping, empty when valid
    """
    errors: dict[str, str] = {}
    for step in LEAD_WIZARD_STEPS:
        errors.update(step.validate(values))
    return errors


class LeadLifecycleService:
    """Use case for every lead operation, enforcing the lifecycle state machine.

    Every mutation runs the checks in a fixed order: role, request payload,
    in-flight guard, then lead load and state guard while the in-flight
    marker is held, and only then the gateway call.
    The returned lead is always the gateway's response; nothing is updated
    optimistically.
    """

    def __init__(
        self,
        lead_gateway: LeadGateway,
        transition_lock: TransitionLock,
        lock_ttl_seconds: int = 60,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize lead lifecycle service.

        Args:
            lead_gateway: Gateway to the lead persistence service
            transition_lock: In-flight guard keyed by lead id
            lock_ttl_seconds: Lifetime of an in-flight marker
            logger: Optional logger function (user_id, request_id, component, **kwargs)
        """
        self._lead_gateway = lead_gateway
        self._transition_lock = transition_lock
        self._lock_ttl_seconds = lock_ttl_seconds
        self._logger = logger

    def _log(self, session: UserSession, request_id: Optional[str], component: str, **kwargs: Any) -> None:
        """Log event if logger is available."""
        if self._logger:
            self._logger(session.user_id, request_id or "unknown", component, **kwargs)

    async def _guarded(
        self,
        session: UserSession,
        lead_id: str,
        action: LeadAction,
        call: Callable[[], Any],
        request_id: Optional[str],
    ) -> Any:
        """Hold the in-flight marker, then load, check the state guard and call the gateway."""
        try:
            async with in_flight(self._transition_lock, "lead", lead_id, self._lock_ttl_seconds):
                lead = await self._lead_gateway.get_lead(session, lead_id)
                ensure_transition(session, lead, action)
                result = await call()
        except SalesConsoleError as exc:
            self._log(
                session,
                request_id,
                "rejection",
                action=action.value,
                entity_id=lead_id,
                kind=exc.kind,
                reason=exc.message,
            )
            raise

        self._log(
            session,
            request_id,
            "lifecycle",
            action=action.value,
            entity_id=lead_id,
            status_before=lead.status.value,
            status_after=result.status.value if isinstance(result, Lead) else None,
        )
        return result

    def _reject(self, session: UserSession, request_id: Optional[str], action: LeadAction, exc: SalesConsoleError) -> None:
        self._log(session, request_id, "rejection", action=action.value, kind=exc.kind, reason=exc.message)

    async def create_lead(
        self, session: UserSession, request: LeadRequest, request_id: Optional[str] = None
    ) -> Lead:
        """
        Create a lead in PENDING status.

        Args:
            session: Caller session
            request: Lead payload
            request_id: Optional request identifier for logging

        Returns:
            Created lead, as returned by the gateway

        Raises:
            PermissionDenied: If the caller has no sales role
            ValidationFailed: If a required field is missing or malformed
        """
        try:
            ensure_allowed(session, LeadAction.CREATE)
            errors = lead_payload_errors(request.field_values())
            if errors:
                raise ValidationFailed(errors)
        except SalesConsoleError as exc:
            self._reject(session, request_id, LeadAction.CREATE, exc)
            raise

        lead = await self._lead_gateway.create_lead(session, request)
        self._log(
            session,
            request_id,
            "lifecycle",
            action=LeadAction.CREATE.value,
            entity_id=lead.id,
            status_after=lead.status.value,
        )
        return lead

    async def validate_lead(
        self,
        session: UserSession,
        lead_id: str,
        request: LeadValidationRequest,
        request_id: Optional[str] = None,
    ) -> Lead:
        """
        Approve or deny a PENDING lead.

        Validation is single-shot: a lead that already carries a decision is
        rejected with Conflict and keeps its first decision.

        Args:
            session: Caller session
            lead_id: Lead identifier
            request: Decision (APPROVED or DENIED) and notes
            request_id: Optional request identifier for logging

        Returns:
            Validated lead

        Raises:
            PermissionDenied: If the caller is not a manager or admin
            ValidationFailed: If the status is not a decision or a denial has no reason
            NotFound: If the lead does not exist
            Conflict: If the lead is not PENDING or a change is in flight
        """
        action = DECISION_ACTIONS.get(request.status, LeadAction.APPROVE)
        try:
            ensure_allowed(session, action)
            ensure_decision_payload(request.status, request.notes)
        except SalesConsoleError as exc:
            self._reject(session, request_id, action, exc)
            raise

        return await self._guarded(
            session,
            lead_id,
            action,
            lambda: self._lead_gateway.validate_lead(session, lead_id, request),
            request_id,
        )

    async def initiate_contact(
        self,
        session: UserSession,
        lead_id: str,
        request: InitiateContactRequest,
        request_id: Optional[str] = None,
    ) -> Lead:
        """
        Record the first contact with an APPROVED lead.

        Raises:
            PermissionDenied: If the caller has no sales role
            ValidationFailed: If contact method or details are missing
            NotFound: If the lead does not exist
            Conflict: If the lead is not APPROVED or already has a contact method
        """
        try:
            ensure_allowed(session, LeadAction.INITIATE_CONTACT)
            ensure_contact_payload(request.contact_method, request.contact_method_details)
        except SalesConsoleError as exc:
            self._reject(session, request_id, LeadAction.INITIATE_CONTACT, exc)
            raise

        return await self._guarded(
            session,
            lead_id,
            LeadAction.INITIATE_CONTACT,
            lambda: self._lead_gateway.initiate_contact(session, lead_id, request),
            request_id,
        )

    async def take_lead(
        self, session: UserSession, lead_id: str, request_id: Optional[str] = None
    ) -> Lead:
        """
        Assign a manager-seeded, unassigned PENDING lead to the calling agent.

        Raises:
            PermissionDenied: If the caller is not a sales agent
            NotFound: If the lead does not exist
            Conflict: If the lead is assigned, not seeded by a manager, or not PENDING
        """
        try:
            ensure_allowed(session, LeadAction.TAKE)
        except SalesConsoleError as exc:
            self._reject(session, request_id, LeadAction.TAKE, exc)
            raise

        return await self._guarded(
            session,
            lead_id,
            LeadAction.TAKE,
            lambda: self._lead_gateway.take_lead(session, lead_id),
            request_id,
        )

    async def update_lead(
        self,
        session: UserSession,
        lead_id: str,
        request: LeadRequest,
        request_id: Optional[str] = None,
    ) -> Lead:
        """
        Replace a lead's descriptive fields. Never changes the status.

        Raises:
            PermissionDenied: If the caller has no sales role
            ValidationFailed: If a required field is missing or malformed
            NotFound: If the lead does not exist
        """
        try:
            ensure_allowed(session, LeadAction.UPDATE)
            errors = lead_payload_errors(request.field_values())
            if errors:
                raise ValidationFailed(errors)
        except SalesConsoleError as exc:
            self._reject(session, request_id, LeadAction.UPDATE, exc)
            raise

        return await self._guarded(
            session,
            lead_id,
            LeadAction.UPDATE,
            lambda: self._lead_gateway.update_lead(session, lead_id, request),
            request_id,
        )

    async def delete_lead(
        self, session: UserSession, lead_id: str, request_id: Optional[str] = None
    ) -> None:
        """
        Delete a lead.

        Raises:
            PermissionDenied: If the caller is not a manager or admin
            NotFound: If the lead does not exist
        """
        try:
            ensure_allowed(session, LeadAction.DELETE)
        except SalesConsoleError as exc:
            self._reject(session, request_id, LeadAction.DELETE, exc)
            raise

        await self._guarded(
            session,
            lead_id,
            LeadAction.DELETE,
            lambda: self._lead_gateway.delete_lead(session, lead_id),
            request_id,
        )

    async def get_lead(self, session: UserSession, lead_id: str) -> Lead:
        ensure_allowed(session, LeadAction.VIEW)
        return await self._lead_gateway.get_lead(session, lead_id)

    async def get_lead_with_actions(
        self, session: UserSession, lead_id: str
    ) -> tuple[Lead, list[LeadAction]]:
        """
        Load a lead together with the actions the caller may perform on it.

        Args:
            session: Caller session
            lead_id: Lead identifier

        Returns:
            Tuple of (lead, permitted actions in display order)
        """
        lead = await self.get_lead(session, lead_id)
        return lead, permitted_actions(session, lead)

    async def list_leads(self, session: UserSession, params: PageParams) -> Page[Lead]:
        ensure_allowed(session, LeadAction.VIEW)
        return await self._lead_gateway.list_leads(session, params)

    async def get_leads_by_status(
        self, session: UserSession, status: LeadStatus, params: PageParams
    ) -> Page[Lead]:
        ensure_allowed(session, LeadAction.VIEW)
        return await self._lead_gateway.get_leads_by_status(session, status, params)

    async def get_my_leads(
        self,
        session: UserSession,
        params: PageParams,
        status: Optional[LeadStatus] = None,
    ) -> Page[Lead]:
        ensure_allowed(session, LeadAction.VIEW)
        return await self._lead_gateway.get_my_leads(session, params, status=status)

    async def pending_queue(self, session: UserSession, params: PageParams) -> Page[Lead]:
        """
        List the leads awaiting a decision.

        Managers and admins see every PENDING lead; agents see their own.

        Args:
            session: Caller session
            params: Page parameters

        Returns:
            Page of PENDING leads
        """
        ensure_allowed(session, LeadAction.VIEW)
        if session.has_any_role(MANAGEMENT_ROLES):
            return await self._lead_gateway.get_leads_by_status(session, LeadStatus.PENDING, params)
        return await self._lead_gateway.get_my_leads(session, params, status=LeadStatus.PENDING)
