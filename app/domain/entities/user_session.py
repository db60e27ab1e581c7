"""Authenticated user session entity."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from app.domain.value_objects.role_id import RoleId, normalize_role


@dataclass(frozen=True)
class UserSession:
    """
    Signed-in user context.

    Created at sign-in and discarded at sign-out. Passed explicitly to every
    component that needs the caller's identity or role; the role is always
    canonical because aliases are normalized when the session is built.
    """

    user_id: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[RoleId] = None
    token: Optional[str] = None
    territory_code: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "UserSession":
        """Session for a caller that is not signed in."""
        return cls()

    @classmethod
    def from_profile(
        cls,
        profile: Mapping[str, Any],
        token: Optional[str] = None,
        territory_code: Optional[str] = None,
    ) -> "UserSession":
        """
        Build a session from a backend user profile.

        Args:
            profile: User profile payload (id, email, firstName, lastName, role)
            token: Bearer token the profile was resolved from
            territory_code: Optional territory scoping header value

        Returns:
            UserSession with a canonical role (None if unrecognized)
        """
        user_id = profile.get("id")
        return cls(
            user_id=str(user_id) if user_id is not None else None,
            email=profile.get("email"),
            first_name=profile.get("firstName"),
            last_name=profile.get("lastName"),
            role=normalize_role(profile.get("role")),
            token=token,
            territory_code=territory_code,
        )

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def display_name(self) -> str:
        """Full name, falling back to the email address."""
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or (self.email or "")

    def has_role(self, role: RoleId) -> bool:
        """Check whether the user's single role equals ``role``."""
        if not self.is_authenticated or self.role is None:
            return False
        return self.role == role

    def has_any_role(self, roles: Iterable[RoleId]) -> bool:
        """
        Check whether the user's role is a member of ``roles``.

        Args:
            roles: Canonical roles that satisfy the check

        Returns:
            False for an unauthenticated session, never raises
        """
        if not self.is_authenticated or self.role is None:
            return False
        return self.role in set(roles)
