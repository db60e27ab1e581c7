"""Persisted wizard sessions for the lead and vendor flows."""

from typing import Any, Callable, Optional, Union
from uuid import uuid4

from app.application.dtos.lead import LeadRequest
from app.application.dtos.vendor import VendorRequest
from app.application.dtos.wizard import WizardStepView, WizardView
from app.application.ports.wizard_state_repository import WizardStateRepository
from app.application.use_cases.convert_lead_to_vendor import ConvertLeadToVendor
from app.application.use_cases.form_wizard import FormWizard, StepDescriptor, StepKind
from app.application.use_cases.manage_lead_lifecycle import LeadLifecycleService
from app.application.use_cases.user_messages import UserMessages
from app.application.use_cases.wizard_steps import LEAD_WIZARD_STEPS, vendor_wizard_steps
from app.domain.entities.lead import Lead
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import Vendor
from app.domain.entities.wizard_state import WizardKind, WizardState
from app.domain.errors import Conflict, NotFound, SalesConsoleError, ValidationFailed
from app.domain.policies.lead_lifecycle import LeadAction, ensure_allowed


def steps_for(state: WizardState) -> tuple[StepDescriptor, ...]:
    """Step list of a wizard state."""
    if state.kind == WizardKind.VENDOR_CREATE:
        return vendor_wizard_steps(lead_preselected=state.lead_preselected)
    return LEAD_WIZARD_STEPS


def _step_view(step: StepDescriptor) -> WizardStepView:
    return WizardStepView(
        key=step.key,
        title=step.title,
        kind=step.kind.value,
        description=step.description,
        fields=step.field_names,
        required_fields=step.required_fields,
    )


def wizard_view(wizard: FormWizard) -> WizardView:
    """
    Build the presentation view of a wizard.

    Args:
        wizard: Controller wrapping the wizard state

    Returns:
        WizardView DTO
    """
    state = wizard.state
    steps = [_step_view(step) for step in wizard.steps]
    return WizardView(
        wizard_id=state.wizard_id,
        kind=state.kind,
        step_index=state.step_index,
        step_count=len(steps),
        current_step=steps[state.step_index],
        steps=steps,
        data=dict(state.data),
        errors=dict(state.errors),
        submit_error=state.submit_error,
        lead_id=state.lead_id,
        can_go_back=state.step_index > 0,
        can_jump=wizard.on_review,
    )


class RunWizard:
    """Use case for wizard sessions that live across HTTP requests.

    Each call loads the state, applies one controller operation and saves the
    state back. A successful submission tears the session down.
    """

    def __init__(
        self,
        repository: WizardStateRepository,
        lifecycle_service: LeadLifecycleService,
        conversion_service: ConvertLeadToVendor,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize wizard session use case.

        Args:
            repository: Wizard state repository
            lifecycle_service: Lead lifecycle service used on lead submissions
            conversion_service: Conversion service used on vendor submissions
            logger: Optional logger function (user_id, request_id, component, **kwargs)
        """
        self._repository = repository
        self._lifecycle_service = lifecycle_service
        self._conversion_service = conversion_service
        self._logger = logger

    def _log(self, session: UserSession, request_id: Optional[str], **kwargs: Any) -> None:
        """Log event if logger is available."""
        if self._logger:
            self._logger(session.user_id, request_id or "unknown", "wizard", **kwargs)

    async def _load(
        self,
        session: UserSession,
        wizard_id: str,
        on_complete: Optional[Callable[[Any], None]] = None,
    ) -> FormWizard:
        state = await self._repository.get(wizard_id)
        # Another user's wizard is reported the same as a missing one
        if state is None or state.owner_id != session.user_id:
            raise NotFound("wizard", wizard_id)
        return FormWizard(steps_for(state), state, on_complete=on_complete)

    async def start(
        self,
        session: UserSession,
        kind: WizardKind,
        lead_id: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> WizardView:
        """
        Start a wizard session.

        Args:
            session: Caller session
            kind: Wizard flow
            lead_id: Lead to edit (lead_edit, required) or to convert (vendor_create, optional)
            request_id: Optional request identifier for logging

        Returns:
            View of the new wizard on its first step

        Raises:
            PermissionDenied: If the caller may not run the flow
            ValidationFailed: If lead_edit is started without a lead id
            NotFound: If the named lead does not exist
            Conflict: If the named lead cannot be converted
        """
        state = WizardState(wizard_id=str(uuid4()), kind=kind, owner_id=session.user_id)

        if kind == WizardKind.LEAD_CREATE:
            ensure_allowed(session, LeadAction.CREATE)
        elif kind == WizardKind.LEAD_EDIT:
            ensure_allowed(session, LeadAction.UPDATE)
            if not lead_id:
                raise ValidationFailed({"lead_id": "A lead is required to edit"})
            lead = await self._lifecycle_service.get_lead(session, lead_id)
            state.data = LeadRequest.model_validate(lead).model_dump(mode="json")
            state.lead_id = lead.id
        else:
            ensure_allowed(session, LeadAction.CONVERT_TO_VENDOR)
            if lead_id:
                lead, draft = await self._conversion_service.load_draft(session, lead_id)
                state.data = draft.model_dump(mode="json")
                state.lead_id = lead.id
                state.lead_preselected = True

        await self._repository.save(state)
        wizard = FormWizard(steps_for(state), state)
        self._log(
            session,
            request_id,
            wizard_id=state.wizard_id,
            step_after=wizard.current_step.key,
            event="start",
            kind=kind.value,
        )
        return wizard_view(wizard)

    async def get(self, session: UserSession, wizard_id: str) -> WizardView:
        return wizard_view(await self._load(session, wizard_id))

    async def set_fields(
        self, session: UserSession, wizard_id: str, values: dict[str, Any]
    ) -> WizardView:
        """
        Merge field values into the wizard data.

        Raises:
            NotFound: If the wizard does not exist
            ValidationFailed: If a value names an unknown field
        """
        wizard = await self._load(session, wizard_id)
        wizard.set_fields(values)
        await self._repository.save(wizard.state)
        return wizard_view(wizard)

    async def next(
        self, session: UserSession, wizard_id: str, request_id: Optional[str] = None
    ) -> WizardView:
        """
        Validate the current step and advance on success.

        The returned view carries per-field errors when the step did not validate.
        """
        wizard = await self._load(session, wizard_id)
        before = wizard.current_step.key
        advanced = wizard.next()
        await self._repository.save(wizard.state)
        self._log(
            session,
            request_id,
            wizard_id=wizard_id,
            step_before=before,
            step_after=wizard.current_step.key,
            event="next",
            advanced=advanced,
            error_fields=sorted(wizard.state.errors),
        )
        return wizard_view(wizard)

    async def previous(
        self, session: UserSession, wizard_id: str, request_id: Optional[str] = None
    ) -> WizardView:
        wizard = await self._load(session, wizard_id)
        before = wizard.current_step.key
        wizard.previous()
        await self._repository.save(wizard.state)
        self._log(
            session,
            request_id,
            wizard_id=wizard_id,
            step_before=before,
            step_after=wizard.current_step.key,
            event="previous",
        )
        return wizard_view(wizard)

    async def jump(
        self,
        session: UserSession,
        wizard_id: str,
        step_index: int,
        request_id: Optional[str] = None,
    ) -> WizardView:
        """
        Jump back to an earlier step from the review step.

        Raises:
            NotFound: If the wizard does not exist
            Conflict: If not on review, or the target is not an earlier step
        """
        wizard = await self._load(session, wizard_id)
        before = wizard.current_step.key
        wizard.jump_to_step(step_index)
        await self._repository.save(wizard.state)
        self._log(
            session,
            request_id,
            wizard_id=wizard_id,
            step_before=before,
            step_after=wizard.current_step.key,
            event="jump",
        )
        return wizard_view(wizard)

    async def select_lead(
        self,
        session: UserSession,
        wizard_id: str,
        lead_id: str,
        request_id: Optional[str] = None,
    ) -> WizardView:
        """
        Pick the conversion source on the select-lead step and pre-fill the draft.

        Raises:
            NotFound: If the wizard or the lead does not exist
            Conflict: If the current step is not the lead picker, or the lead is not CONTACTED
        """
        wizard = await self._load(session, wizard_id)
        if wizard.current_step.kind != StepKind.SELECT_LEAD:
            raise Conflict(UserMessages.NOT_A_SELECT_STEP)

        lead, draft = await self._conversion_service.load_draft(session, lead_id)
        wizard.state.update_fields(draft.model_dump(mode="json"))
        wizard.state.lead_id = lead.id
        await self._repository.save(wizard.state)
        self._log(session, request_id, wizard_id=wizard_id, event="select_lead", lead_id=lead.id)
        return wizard_view(wizard)

    async def submit(
        self,
        session: UserSession,
        wizard_id: str,
        request_id: Optional[str] = None,
        on_complete: Optional[Callable[[Any], None]] = None,
    ) -> Union[Lead, Vendor]:
        """
        Submit the wizard from its review step.

        On success the session is deleted and the created or updated entity
        returned. On failure the session stays on review with the error
        recorded, and the error is re-raised.

        Args:
            session: Caller session
            wizard_id: Wizard identifier
            request_id: Optional request identifier for logging
            on_complete: Optional callback fired with the entity on success

        Returns:
            Created lead, updated lead or created vendor
        """
        wizard = await self._load(session, wizard_id, on_complete=on_complete)
        state = wizard.state

        async def submitter(data: dict[str, Any]) -> Union[Lead, Vendor]:
            if state.kind == WizardKind.LEAD_CREATE:
                return await self._lifecycle_service.create_lead(
                    session, LeadRequest.model_validate(data), request_id=request_id
                )
            if state.kind == WizardKind.LEAD_EDIT:
                return await self._lifecycle_service.update_lead(
                    session, state.lead_id, LeadRequest.model_validate(data), request_id=request_id
                )
            return await self._conversion_service.convert(
                session, VendorRequest.model_validate(data), request_id=request_id
            )

        try:
            entity = await wizard.submit(submitter)
        except SalesConsoleError as exc:
            await self._repository.save(state)
            self._log(
                session,
                request_id,
                wizard_id=wizard_id,
                event="submit_failed",
                kind=exc.kind,
                submit_error=state.submit_error,
            )
            raise

        await self._repository.delete(wizard_id)
        self._log(
            session,
            request_id,
            wizard_id=wizard_id,
            event="completed",
            entity_id=entity.id,
        )
        return entity
