"""Transition lock adapters."""

from app.adapters.outbound.transition_lock.in_memory_transition_lock import InMemoryTransitionLock
from app.adapters.outbound.transition_lock.redis_transition_lock import RedisTransitionLock

__all__ = [
    "InMemoryTransitionLock",
    "RedisTransitionLock",
]
