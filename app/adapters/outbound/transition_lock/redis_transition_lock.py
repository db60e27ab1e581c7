"""Redis transition lock adapter."""

import uuid
from typing import Optional

from redis import asyncio as aioredis

from app.application.ports.transition_lock import TransitionLock
from app.domain.errors import TransportFailure
from app.infrastructure.logging.logger import logger


# Deletes the marker only while it still carries the caller's token
RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class RedisTransitionLock(TransitionLock):
    """Transition lock shared by several workers through Redis ``SET NX EX``.

    The marker value is a per-acquisition token; release is a compare-and-delete
    script, so a holder whose marker expired leaves the next holder's marker alone.
    """

    KEY_PREFIX = "transition:inflight:"

    def __init__(self, redis_url: str) -> None:
        """
        Initialize Redis transition lock.

        Args:
            redis_url: Redis connection URL
        """
        self._redis_url = redis_url
        self._client: Optional[aioredis.Redis] = None

    async def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = await aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    async def acquire(self, key: str, ttl_seconds: int) -> Optional[str]:
        """
        Mark a key as in flight if no other worker holds it.

        Returns:
            Holder token, or None if the key is already in flight

        Raises:
            TransportFailure: If Redis is unreachable
        """
        try:
            client = await self._get_client()
            token = uuid.uuid4().hex
            acquired = await client.set(self._make_key(key), token, nx=True, ex=ttl_seconds)
        except Exception as e:
            logger.error(f"Error acquiring transition lock {key}: {str(e)}")
            raise TransportFailure("Could not reserve the record for this change") from e
        return token if acquired else None

    async def release(self, key: str, token: str) -> None:
        try:
            client = await self._get_client()
            await client.eval(RELEASE_SCRIPT, 1, self._make_key(key), token)
        except Exception as e:
            # The key frees itself when its TTL runs out
            logger.warning(f"Error releasing transition lock {key}: {str(e)}")

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            self._client = None
