"""Identity provider serving fixed demo users."""

from typing import Any, Optional

from app.application.ports.identity_provider import IdentityProvider
from app.domain.entities.user_session import UserSession
from app.infrastructure.logging.logger import logger

# Token to backend-shaped profile. Roles use both payload shapes and a legacy alias.
DEMO_PROFILES: dict[str, dict[str, Any]] = {
    "demo-admin": {
        "id": "u-admin",
        "email": "admin@treadx.com",
        "firstName": "Platform",
        "lastName": "Admin",
        "role": {"name": "PLATFORM_ADMIN"},
    },
    "demo-manager": {
        "id": "u-manager",
        "email": "manager@treadx.com",
        "firstName": "Sales",
        "lastName": "Manager",
        "role": "SALES_MANAGER",
    },
    "demo-agent": {
        "id": "u-agent",
        "email": "agent@treadx.com",
        "firstName": "Ahmad",
        "lastName": "Lounitch",
        "role": "SALES_AGENT",
    },
    "demo-agent-2": {
        "id": "u-agent-2",
        "email": "rep@treadx.com",
        "firstName": "Jordan",
        "lastName": "Reyes",
        "role": "sales_rep",
    },
}


class StaticIdentityProvider(IdentityProvider):
    """Resolve tokens against an in-process profile table."""

    def __init__(
        self,
        profiles: Optional[dict[str, dict[str, Any]]] = None,
        territory_code: str = "",
    ) -> None:
        """
        Initialize static identity provider.

        Args:
            profiles: Token to profile mapping (demo users if omitted)
            territory_code: Territory attached to resolved sessions
        """
        self._profiles = DEMO_PROFILES if profiles is None else profiles
        self._territory_code = territory_code or None

    async def resolve(self, token: str) -> UserSession:
        profile = self._profiles.get(token)
        if profile is None:
            return UserSession.anonymous()

        session = UserSession.from_profile(profile, token=token, territory_code=self._territory_code)
        if session.role is None:
            logger.warning(f"Unrecognized role for user {session.user_id}: {profile.get('role')!r}")
        return session
