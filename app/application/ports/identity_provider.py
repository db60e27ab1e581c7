"""Identity provider port."""

from abc import ABC, abstractmethod

from app.domain.entities.user_session import UserSession


class IdentityProvider(ABC):
    """Port interface for the authentication context."""

    @abstractmethod
    async def resolve(self, token: str) -> UserSession:
        """
        Resolve a bearer token into a user session.

        Args:
            token: Bearer token issued at sign-in

        Returns:
            Session for the token's user, or an anonymous session if the
            token is unknown or expired
        """
        pass
