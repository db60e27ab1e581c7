"""Domain error taxonomy.

Each failure kind is its own exception type so callers can tell a missing
permission from a bad payload, a missing record, a violated guard and a
transport failure without inspecting messages.
"""

from typing import Optional


class SalesConsoleError(Exception):
    """Base class for all lead/vendor pipeline failures."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PermissionDenied(SalesConsoleError):
    """The signed-in role does not satisfy the required role set."""

    kind = "permission_denied"


class ValidationFailed(SalesConsoleError):
    """A required field is missing or fails a format rule."""

    kind = "validation_failed"

    def __init__(self, field_errors: dict[str, str], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.field_errors = dict(field_errors)


class NotFound(SalesConsoleError):
    """The referenced lead or vendor does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity.capitalize()} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class Conflict(SalesConsoleError):
    """A transition guard does not hold for the entity's current state."""

    kind = "conflict"


class TransitionInFlight(Conflict):
    """A transition for the same entity has not resolved yet."""

    kind = "in_flight"


class TransportFailure(SalesConsoleError):
    """Network or server error unrelated to business rules."""

    kind = "transport_failure"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
