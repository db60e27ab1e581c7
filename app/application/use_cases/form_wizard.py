"""Multi-step form wizard controller."""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, TypeVar

from app.application.use_cases.user_messages import UserMessages
from app.domain.entities.wizard_state import WizardState
from app.domain.errors import Conflict, SalesConsoleError, ValidationFailed

ResultT = TypeVar("ResultT")


class StepKind(str, Enum):
    """Variant tag of a wizard step."""

    FORM = "form"
    SELECT_LEAD = "select_lead"
    REVIEW = "review"


@dataclass(frozen=True)
class FieldRule:
    """One input field of a form step.

    ``required_message`` set means the field is required. ``format_check`` runs
    only on non-blank values and gates exactly like a missing field.
    """

    name: str
    required_message: Optional[str] = None
    format_check: Optional[Callable[[Any], bool]] = None
    format_message: str = ""
    formatter: Optional[Callable[[str], str]] = None

    @property
    def required(self) -> bool:
        return self.required_message is not None


@dataclass(frozen=True)
class StepDescriptor:
    """Tagged step descriptor: kind, field set, required set and validator."""

    key: str
    title: str
    kind: StepKind = StepKind.FORM
    fields: tuple[FieldRule, ...] = ()
    description: str = ""

    @property
    def field_names(self) -> list[str]:
        return [rule.name for rule in self.fields]

    @property
    def required_fields(self) -> list[str]:
        return [rule.name for rule in self.fields if rule.required]

    def validate(self, data: dict[str, Any]) -> dict[str, str]:
        """
        Validate this step's fields against the accumulated data.

        Pure: never mutates ``data``.

        Args:
            data: Accumulated wizard data

        Returns:
            Field name to message mapping, empty when the step is complete
        """
        if self.kind == StepKind.SELECT_LEAD:
            if not data.get("lead_id"):
                return {"lead_id": UserMessages.LEAD_SELECTION_REQUIRED}
            return {}
        if self.kind == StepKind.REVIEW:
            return {}

        errors: dict[str, str] = {}
        for rule in self.fields:
            value = data.get(rule.name)
            blank = value is None or (isinstance(value, str) and not value.strip())
            if blank:
                if rule.required:
                    errors[rule.name] = rule.required_message
            elif rule.format_check is not None and not rule.format_check(value):
                errors[rule.name] = rule.format_message
        return errors


class FormWizard:
    """
    Drive a wizard state through an ordered list of step descriptors.

    ``next`` is validation-gated, ``previous`` is free, ``jump_to_step`` is only
    offered from the review step and only backwards, and ``submit`` runs only
    from the review step.
    """

    def __init__(
        self,
        steps: Sequence[StepDescriptor],
        state: WizardState,
        on_complete: Optional[Callable[[Any], None]] = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            steps: Ordered step descriptors, the last one being the review step
            state: Wizard state to drive (mutated in place)
            on_complete: Optional callback fired with the submitted entity
        """
        if not steps:
            raise ValueError("A wizard needs at least one step")
        self._steps = list(steps)
        self._state = state
        self._on_complete = on_complete
        self._rules = {rule.name: rule for step in self._steps for rule in step.fields}
        self.completed = False
        if not 0 <= state.step_index < len(self._steps):
            state.step_index = 0

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def steps(self) -> list[StepDescriptor]:
        return list(self._steps)

    @property
    def current_step(self) -> StepDescriptor:
        return self._steps[self._state.step_index]

    @property
    def on_review(self) -> bool:
        return self.current_step.kind == StepKind.REVIEW

    def set_fields(self, values: dict[str, Any]) -> None:
        """
        Merge user input, applying each field's formatter.

        Raises:
            ValidationFailed: If a value names a field no step declares
        """
        unknown = {name: "Unknown field" for name in values if name not in self._rules}
        if unknown:
            raise ValidationFailed(unknown)

        formatted = {}
        for name, value in values.items():
            formatter = self._rules[name].formatter
            if formatter is not None and isinstance(value, str):
                value = formatter(value)
            formatted[name] = value
        self._state.update_fields(formatted)

    def next(self) -> bool:
        """
        Advance one step if the current step validates.

        Returns:
            True if the wizard advanced (or is already on the last step and valid)
        """
        errors = self.current_step.validate(self._state.data)
        if errors:
            self._state.errors.update(errors)
            self._state.touch()
            return False

        self._state.errors = {}
        if self._state.step_index < len(self._steps) - 1:
            self._state.step_index += 1
        self._state.touch()
        return True

    def _move_to(self, index: int) -> None:
        # Errors of the step being left are dropped; those of the target step stay visible
        self._state.step_index = index
        fields = set(self.current_step.field_names)
        self._state.errors = {name: text for name, text in self._state.errors.items() if name in fields}
        self._state.submit_error = None
        self._state.touch()

    def previous(self) -> None:
        """Go back one step without validation. Stays on the first step."""
        self._move_to(max(0, self._state.step_index - 1))

    def jump_to_step(self, index: int) -> None:
        """
        Jump back to an earlier step from the review step.

        Raises:
            Conflict: If not on the review step, or ``index`` is not an earlier step
        """
        if not self.on_review:
            raise Conflict(UserMessages.JUMP_ONLY_FROM_REVIEW)
        if not 0 <= index < self._state.step_index:
            raise Conflict(UserMessages.JUMP_ONLY_BACKWARDS)
        self._move_to(index)

    def validate_all(self) -> dict[str, str]:
        """Validate every step against the accumulated data."""
        errors: dict[str, str] = {}
        for step in self._steps:
            errors.update(step.validate(self._state.data))
        return errors

    async def submit(self, submitter: Callable[[dict[str, Any]], Awaitable[ResultT]]) -> ResultT:
        """
        Submit the accumulated data from the review step.

        On failure the wizard stays on review with the error recorded in
        ``state.submit_error`` and the error is re-raised. On success the
        completion callback fires and ``completed`` is set.

        Args:
            submitter: Coroutine function that persists the data

        Returns:
            Entity returned by the submitter

        Raises:
            Conflict: If not on the review step
            ValidationFailed: If any step no longer validates
            SalesConsoleError: Whatever the submitter raised
        """
        if not self.on_review:
            raise Conflict(UserMessages.SUBMIT_ONLY_FROM_REVIEW)

        errors = self.validate_all()
        if errors:
            self._state.errors.update(errors)
            self._state.submit_error = "Please correct the highlighted fields"
            self._state.touch()
            raise ValidationFailed(errors, message=self._state.submit_error)

        self._state.submit_error = None
        try:
            result = await submitter(dict(self._state.data))
        except SalesConsoleError as exc:
            self._state.submit_error = UserMessages.submit_failed(exc.kind, exc.message)
            if isinstance(exc, ValidationFailed):
                self._state.errors.update(exc.field_errors)
            self._state.touch()
            raise

        self.completed = True
        if self._on_complete is not None:
            self._on_complete(result)
        return result
