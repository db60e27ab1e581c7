"""Wizard state repository adapters."""

from app.adapters.outbound.wizard_state.in_memory_wizard_state_repository import (
    InMemoryWizardStateRepository,
)
from app.adapters.outbound.wizard_state.redis_wizard_state_repository import (
    RedisWizardStateRepository,
)

__all__ = [
    "InMemoryWizardStateRepository",
    "RedisWizardStateRepository",
]
