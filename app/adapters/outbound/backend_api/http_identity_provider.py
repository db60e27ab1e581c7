"""Identity provider backed by the TreadX users endpoint."""

from app.adapters.outbound.backend_api.client import BackendClient
from app.adapters.outbound.backend_api.models import UserProfilePayload
from app.application.ports.identity_provider import IdentityProvider
from app.domain.entities.user_session import UserSession
from app.domain.errors import PermissionDenied, TransportFailure
from app.infrastructure.logging.logger import logger


class HttpIdentityProvider(IdentityProvider):
    """Resolve bearer tokens through ``GET /api/v1/users/me``."""

    def __init__(self, client: BackendClient, territory_code: str = "") -> None:
        """
        Initialize HTTP identity provider.

        Args:
            client: TreadX backend client
            territory_code: Territory attached to resolved sessions
        """
        self._client = client
        self._territory_code = territory_code or None

    async def resolve(self, token: str) -> UserSession:
        try:
            data = await self._client.request(
                "GET", "/users/me", token=token, default_error="Failed to load profile"
            )
        except (PermissionDenied, TransportFailure) as exc:
            # 401 arrives as TransportFailure; both mean the token is unusable
            if isinstance(exc, TransportFailure) and exc.status_code not in (401, 403):
                raise
            logger.warning(f"Token rejected by backend: {exc.message}")
            return UserSession.anonymous()

        profile = UserProfilePayload.parse(data)
        session = UserSession.from_profile(
            profile.model_dump(by_alias=True),
            token=token,
            territory_code=self._territory_code,
        )
        if session.role is None:
            logger.warning(f"Unrecognized role for user {session.user_id}: {profile.role!r}")
        return session
