"""Canonical role identifiers and legacy alias normalization."""

from enum import Enum
from typing import Any, Optional


class RoleId(str, Enum):
    """Canonical user roles. Flat enumeration, no hierarchy."""

    PLATFORM_ADMIN = "PLATFORM_ADMIN"
    SALES_MANAGER = "SALES_MANAGER"
    SALES_AGENT = "SALES_AGENT"


# Legacy role names still issued during the migration window
LEGACY_ROLE_ALIASES: dict[str, RoleId] = {
    "admin": RoleId.PLATFORM_ADMIN,
    "manager": RoleId.SALES_MANAGER,
    "sales_rep": RoleId.SALES_AGENT,
    "mechanic": RoleId.SALES_AGENT,
}

ALL_ROLES: frozenset[RoleId] = frozenset(RoleId)
MANAGEMENT_ROLES: frozenset[RoleId] = frozenset({RoleId.PLATFORM_ADMIN, RoleId.SALES_MANAGER})


def normalize_role(raw: Any) -> Optional[RoleId]:
    """
    Normalize a role payload to its canonical RoleId.

    The backend returns the role either as a plain string or as an object
    carrying a ``name`` key. Matching is exact and case-sensitive.

    Args:
        raw: Role payload (RoleId, str, mapping with "name", or None)

    Returns:
        Canonical RoleId, or None if the role is missing or unrecognized
    """
    if isinstance(raw, RoleId):
        return raw
    if isinstance(raw, dict):
        raw = raw.get("name")
    if not isinstance(raw, str):
        return None
    if raw in RoleId._value2member_map_:
        return RoleId(raw)
    return LEGACY_ROLE_ALIASES.get(raw)
