"""In-memory adapter for wizard state."""

import copy
from typing import Optional

from app.application.ports.wizard_state_repository import WizardStateRepository
from app.domain.entities.wizard_state import WizardState


class InMemoryWizardStateRepository(WizardStateRepository):
    """In-memory implementation of wizard state repository."""

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._states: dict[str, WizardState] = {}

    async def get(self, wizard_id: str) -> Optional[WizardState]:
        state = self._states.get(wizard_id)
        # Callers mutate the returned state; only save() may change the stored one
        return copy.deepcopy(state) if state is not None else None

    async def save(self, state: WizardState) -> None:
        state.touch()
        self._states[state.wizard_id] = copy.deepcopy(state)

    async def delete(self, wizard_id: str) -> None:
        self._states.pop(wizard_id, None)
