"""Vendor authorization matrix."""

from enum import Enum

from app.domain.entities.user_session import UserSession
from app.domain.errors import PermissionDenied
from app.domain.value_objects.role_id import ALL_ROLES, MANAGEMENT_ROLES, RoleId


class VendorAction(str, Enum):
    """Operations a user may attempt on a vendor."""

    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    TOGGLE_STATUS = "toggle_status"
    DELETE = "delete"


ALLOWED_ROLES: dict[VendorAction, frozenset[RoleId]] = {
    VendorAction.VIEW: ALL_ROLES,
    VendorAction.CREATE: ALL_ROLES,
    VendorAction.UPDATE: ALL_ROLES,
    VendorAction.TOGGLE_STATUS: MANAGEMENT_ROLES,
    VendorAction.DELETE: MANAGEMENT_ROLES,
}


def ensure_vendor_allowed(session: UserSession, action: VendorAction) -> None:
    """
    Reject a caller whose role may not perform ``action`` on vendors.

    Raises:
        PermissionDenied: If the session is anonymous or the role is not allowed
    """
    if not session.has_any_role(ALLOWED_ROLES[action]):
        raise PermissionDenied(f"Your role is not allowed to {action.value.replace('_', ' ')} vendors")
