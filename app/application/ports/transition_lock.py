"""Transition lock port."""

from abc import ABC, abstractmethod
from typing import Optional


class TransitionLock(ABC):
    """Port interface for the in-flight transition guard.

    A key is held while a transition for one entity is awaiting the backend;
    a second attempt on the same key is refused until the first resolves.
    Each acquisition gets its own token so a holder whose marker expired
    cannot release the marker of the next holder.
    """

    @abstractmethod
    async def acquire(self, key: str, ttl_seconds: int) -> Optional[str]:
        """
        Try to mark a key as in flight.

        Args:
            key: Entity key (e.g. "lead:42")
            ttl_seconds: Time-to-live after which the key frees itself

        Returns:
            Holder token if acquired, None if the key is already in flight
        """
        pass

    @abstractmethod
    async def release(self, key: str, token: str) -> None:
        """
        Release a key if it is still held under the given token.

        Args:
            key: Entity key
            token: Token returned by ``acquire``
        """
        pass
