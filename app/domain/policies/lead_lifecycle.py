"""Lead lifecycle state machine and its authorization matrix.

Every transition is described by the roles allowed to trigger it and the
states it may start from. ``ensure_*`` functions raise the matching domain
error; the ``can_*`` / ``permitted_actions`` helpers answer the same
questions without raising, for the presentation layer.
"""

from enum import Enum
from typing import Optional

from app.domain.entities.lead import LEAD_REQUIRED_FIELDS, Lead, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.errors import Conflict, PermissionDenied, ValidationFailed
from app.domain.value_objects.role_id import ALL_ROLES, MANAGEMENT_ROLES, RoleId


class LeadAction(str, Enum):
    """Operations a user may attempt on a lead."""

    CREATE = "create"
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    DENY = "deny"
    INITIATE_CONTACT = "initiate_contact"
    CONVERT_TO_VENDOR = "convert_to_vendor"
    TAKE = "take"


ALLOWED_ROLES: dict[LeadAction, frozenset[RoleId]] = {
    LeadAction.CREATE: ALL_ROLES,
    LeadAction.VIEW: ALL_ROLES,
    LeadAction.UPDATE: ALL_ROLES,
    LeadAction.DELETE: MANAGEMENT_ROLES,
    LeadAction.APPROVE: MANAGEMENT_ROLES,
    LeadAction.DENY: MANAGEMENT_ROLES,
    LeadAction.INITIATE_CONTACT: ALL_ROLES,
    LeadAction.CONVERT_TO_VENDOR: ALL_ROLES,
    LeadAction.TAKE: frozenset({RoleId.SALES_AGENT}),
}

# States each transition may start from; None means "any state"
SOURCE_STATES: dict[LeadAction, Optional[frozenset[LeadStatus]]] = {
    LeadAction.VIEW: None,
    LeadAction.UPDATE: None,
    LeadAction.DELETE: None,
    LeadAction.APPROVE: frozenset({LeadStatus.PENDING}),
    LeadAction.DENY: frozenset({LeadStatus.PENDING}),
    LeadAction.INITIATE_CONTACT: frozenset({LeadStatus.APPROVED}),
    LeadAction.CONVERT_TO_VENDOR: frozenset({LeadStatus.CONTACTED}),
    LeadAction.TAKE: frozenset({LeadStatus.PENDING}),
}

DECISION_ACTIONS: dict[LeadStatus, LeadAction] = {
    LeadStatus.APPROVED: LeadAction.APPROVE,
    LeadStatus.DENIED: LeadAction.DENY,
}

# Actions offered on a loaded lead, in display order
LEAD_ACTIONS_ON_RECORD = (
    LeadAction.APPROVE,
    LeadAction.DENY,
    LeadAction.INITIATE_CONTACT,
    LeadAction.CONVERT_TO_VENDOR,
    LeadAction.TAKE,
    LeadAction.UPDATE,
    LeadAction.DELETE,
)

_FIELD_LABELS = {
    "business_name": "Business name",
    "phone_number": "Phone number",
    "street_number": "Street number",
    "street_name": "Street name",
    "postal_code": "Postal code",
    "source": "Lead source",
}


def is_allowed(role: Optional[RoleId], action: LeadAction) -> bool:
    """
    Check the authorization matrix for a role.

    Args:
        role: Canonical role, or None for no role
        action: Lead action

    Returns:
        True if the role may trigger the action
    """
    if role is None:
        return False
    return role in ALLOWED_ROLES[action]


def ensure_allowed(session: UserSession, action: LeadAction) -> None:
    """
    Reject a caller whose role may not trigger ``action``.

    Raises:
        PermissionDenied: If the session is anonymous or the role is not allowed
    """
    if not session.has_any_role(ALLOWED_ROLES[action]):
        raise PermissionDenied(f"Your role is not allowed to {action.value.replace('_', ' ')} leads")


def guard_violation(lead: Lead, action: LeadAction) -> Optional[str]:
    """
    Describe why ``action`` cannot run on ``lead`` in its current state.

    Args:
        lead: Loaded lead
        action: Lead action

    Returns:
        Human-readable reason, or None if the state guard holds
    """
    sources = SOURCE_STATES.get(action)
    if action in (LeadAction.APPROVE, LeadAction.DENY) and lead.is_validated:
        return f"Lead has already been validated ({lead.status.value})"
    if sources is not None and lead.status not in sources:
        return f"Cannot {action.value.replace('_', ' ')} a lead in status {lead.status.value}"

    if action == LeadAction.INITIATE_CONTACT and lead.has_contact:
        return "Contact has already been initiated for this lead"
    if action == LeadAction.CONVERT_TO_VENDOR and lead.is_converted:
        return "Lead has already been converted to a vendor"
    if action == LeadAction.TAKE:
        if lead.assigned_to is not None:
            return "Lead is already assigned"
        if not lead.added_by_manager:
            return "Only leads seeded by a manager can be taken"
    return None


def ensure_transition(session: UserSession, lead: Lead, action: LeadAction) -> None:
    """
    Re-validate role and state guard before a lead is mutated.

    Raises:
        PermissionDenied: If the role may not trigger the action
        Conflict: If the lead's current state does not admit the action
    """
    ensure_allowed(session, action)
    reason = guard_violation(lead, action)
    if reason is not None:
        raise Conflict(reason)


def can_perform(session: UserSession, lead: Lead, action: LeadAction) -> bool:
    """Non-raising variant of ``ensure_transition``."""
    return session.has_any_role(ALLOWED_ROLES[action]) and guard_violation(lead, action) is None


def permitted_actions(session: UserSession, lead: Lead) -> list[LeadAction]:
    """
    List the actions the signed-in user may currently perform on a lead.

    Args:
        session: Caller session
        lead: Loaded lead

    Returns:
        Actions whose role and state guard both hold, in display order
    """
    return [action for action in LEAD_ACTIONS_ON_RECORD if can_perform(session, lead, action)]


def decision_action(status: LeadStatus) -> LeadAction:
    """
    Map a validation decision to its transition.

    Raises:
        ValidationFailed: If the status is not a validation outcome
    """
    action = DECISION_ACTIONS.get(status)
    if action is None:
        raise ValidationFailed({"status": "Validation status must be APPROVED or DENIED"})
    return action


def ensure_decision_payload(status: LeadStatus, notes: Optional[str]) -> None:
    """
    Check a validation decision before any request is issued.

    Raises:
        ValidationFailed: If the status is not a decision, or a denial has no reason
    """
    decision_action(status)
    if status == LeadStatus.DENIED and not (notes or "").strip():
        raise ValidationFailed({"notes": "A reason is required when denying a lead"})


def ensure_contact_payload(contact_method: Optional[str], contact_method_details: Optional[str]) -> None:
    """
    Check the mandatory parts of a contact request.

    Raises:
        ValidationFailed: If method or details are missing
    """
    errors: dict[str, str] = {}
    if not contact_method:
        errors["contact_method"] = "Contact method is required"
    if not (contact_method_details or "").strip():
        errors["contact_method_details"] = "Contact details are required"
    if errors:
        raise ValidationFailed(errors)


def missing_lead_fields(values: dict) -> dict[str, str]:
    """
    Find required lead fields that are absent or blank.

    Args:
        values: Field name to value mapping (snake_case names)

    Returns:
        Field name to error message mapping, empty when complete
    """
    errors = {}
    for name in LEAD_REQUIRED_FIELDS:
        value = values.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[name] = f"{_FIELD_LABELS[name]} is required"
    return errors
