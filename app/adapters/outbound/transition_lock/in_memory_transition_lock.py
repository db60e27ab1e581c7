"""In-memory transition lock adapter."""

import time
import uuid
from typing import Optional

from app.application.ports.transition_lock import TransitionLock


class InMemoryTransitionLock(TransitionLock):
    """Single-process implementation of the transition lock."""

    def __init__(self) -> None:
        """Initialize with no key in flight."""
        self._holders: dict[str, tuple[str, float]] = {}

    async def acquire(self, key: str, ttl_seconds: int) -> Optional[str]:
        now = time.monotonic()
        holder = self._holders.get(key)
        if holder is not None and holder[1] > now:
            return None
        token = uuid.uuid4().hex
        self._holders[key] = (token, now + ttl_seconds)
        return token

    async def release(self, key: str, token: str) -> None:
        holder = self._holders.get(key)
        if holder is not None and holder[0] == token:
            del self._holders[key]
