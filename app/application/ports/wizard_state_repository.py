"""Wizard state repository port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.entities.wizard_state import WizardState


class WizardStateRepository(ABC):
    """Port interface for wizard state repository."""

    @abstractmethod
    async def get(self, wizard_id: str) -> Optional[WizardState]:
        """
        Get wizard state.

        Args:
            wizard_id: Wizard identifier

        Returns:
            Wizard state entity, or None if not found
        """
        pass

    @abstractmethod
    async def save(self, state: WizardState) -> None:
        """
        Save wizard state.

        Args:
            state: Wizard state entity to save
        """
        pass

    @abstractmethod
    async def delete(self, wizard_id: str) -> None:
        """
        Delete wizard state.

        Args:
            wizard_id: Wizard identifier
        """
        pass
