"""Wizard DTOs."""

from typing import Any, Optional

from app.application.dtos.base import DTO
from app.application.dtos.lead import LeadResponse
from app.application.dtos.vendor import VendorResponse
from app.domain.entities.wizard_state import WizardKind


class StartWizardRequest(DTO):
    """Start a wizard session."""

    kind: WizardKind
    lead_id: Optional[str] = None

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {"example": {"kind": "vendor_create", "leadId": "42"}}


class WizardFieldsRequest(DTO):
    """Field values entered on the current step, keyed by snake_case name."""

    values: dict[str, Any]


class JumpRequest(DTO):
    """Target step of a jump from the review step."""

    step_index: int


class SelectLeadRequest(DTO):
    """Lead picked on the select-lead step."""

    lead_id: str


class WizardStepView(DTO):
    """One step descriptor as shown to the user."""

    key: str
    title: str
    kind: str
    description: str
    fields: list[str]
    required_fields: list[str]


class WizardView(DTO):
    """Current state of a wizard session."""

    wizard_id: str
    kind: WizardKind
    step_index: int
    step_count: int
    current_step: WizardStepView
    steps: list[WizardStepView]
    data: dict[str, Any]
    errors: dict[str, str]
    submit_error: Optional[str] = None
    lead_id: Optional[str] = None
    can_go_back: bool
    can_jump: bool


class WizardSubmitResponse(DTO):
    """Entity created or updated by a successful submission."""

    wizard_id: str
    kind: WizardKind
    lead: Optional[LeadResponse] = None
    vendor: Optional[VendorResponse] = None
