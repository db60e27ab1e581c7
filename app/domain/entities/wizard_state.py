"""Wizard state entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class WizardKind(str, Enum):
    """Which entity flow a wizard drives."""

    LEAD_CREATE = "lead_create"
    LEAD_EDIT = "lead_edit"
    VENDOR_CREATE = "vendor_create"


@dataclass
class WizardState:
    """Progress of one multi-step form wizard."""

    wizard_id: str
    kind: WizardKind
    owner_id: Optional[str] = None
    step_index: int = 0
    data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    submit_error: Optional[str] = None
    # Lead being edited, or the conversion source picked up front
    lead_id: Optional[str] = None
    # Vendor wizard started from a known lead skips the lead picker
    lead_preselected: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now(timezone.utc)

    def update_fields(self, values: dict[str, Any]) -> None:
        """
        Merge field values into the accumulated data.

        Clears the validation error of every field that was touched.

        Args:
            values: Field name to value mapping
        """
        for name, value in values.items():
            self.data[name] = value
            self.errors.pop(name, None)
        self.touch()
