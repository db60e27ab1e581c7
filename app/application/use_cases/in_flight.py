"""Re-entrancy guard for entity transitions."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from app.application.ports.transition_lock import TransitionLock
from app.domain.errors import TransitionInFlight


@asynccontextmanager
async def in_flight(lock: TransitionLock, entity: str, entity_id: str, ttl_seconds: int) -> AsyncIterator[None]:
    """
    Hold the in-flight marker of one entity for the duration of a transition.

    Args:
        lock: Transition lock port
        entity: Entity kind used in the key (e.g. "lead")
        entity_id: Entity identifier
        ttl_seconds: Lifetime of the marker if it is never released

    Raises:
        TransitionInFlight: If a transition for the same entity has not resolved
    """
    key = f"{entity}:{entity_id}"
    token = await lock.acquire(key, ttl_seconds)
    if token is None:
        raise TransitionInFlight(f"Another change to {entity} {entity_id} is still in progress")
    try:
        yield
    finally:
        await lock.release(key, token)
