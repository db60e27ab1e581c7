"""Structured logger for observability."""

import logging
from typing import Any, Optional

# Configure root logger with key=value structured format
_logger = logging.getLogger("treadx_sales_console")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_event(
    user_id: Optional[str],
    request_id: str,
    component: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """
    Log structured event for one inbound request.

    Args:
        user_id: Signed-in user identifier (None when anonymous)
        request_id: Request identifier (UUID string)
        component: Component name (e.g., 'http', 'lifecycle', 'wizard')
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    fields = {
        "user_id": user_id,
        "request_id": request_id,
        "component": component,
    }
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    log_message = " | ".join(log_parts)

    _logger.log(level, log_message)


def log_transition(
    user_id: Optional[str],
    request_id: str,
    entity_id: str,
    action: str,
    status_before: Optional[str] = None,
    status_after: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a lead lifecycle transition.

    Args:
        user_id: Caller identifier
        request_id: Request identifier
        entity_id: Lead identifier
        action: Lifecycle action (e.g., 'approve', 'take')
        status_before: Status before the transition
        status_after: Status returned by the backend
        **kwargs: Additional fields
    """
    fields: dict[str, Any] = {"entity_id": entity_id, "action": action}
    if status_before is not None:
        fields["status_before"] = status_before
    if status_after is not None:
        fields["status_after"] = status_after
    fields.update(kwargs)

    log_event(user_id, request_id, "lifecycle", **fields)


def log_rejection(
    user_id: Optional[str],
    request_id: str,
    kind: str,
    reason: str,
    **kwargs: Any,
) -> None:
    """
    Log a rejected operation.

    Args:
        user_id: Caller identifier
        request_id: Request identifier
        kind: Error kind (e.g., 'permission_denied', 'conflict')
        reason: Human-readable reason
        **kwargs: Additional fields
    """
    log_event(
        user_id,
        request_id,
        "rejection",
        level=logging.WARNING,
        kind=kind,
        reason=reason,
        **kwargs,
    )


def log_wizard_step(
    user_id: Optional[str],
    request_id: str,
    wizard_id: str,
    step_before: Optional[str] = None,
    step_after: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log wizard step movement.

    Args:
        user_id: Caller identifier
        request_id: Request identifier
        wizard_id: Wizard identifier
        step_before: Step key before the move
        step_after: Step key after the move
        **kwargs: Additional fields
    """
    fields: dict[str, Any] = {"wizard_id": wizard_id}
    if step_before is not None:
        fields["step_before"] = step_before
    if step_after is not None:
        fields["step_after"] = step_after
    fields.update(kwargs)

    log_event(user_id, request_id, "wizard", **fields)


def log_backend_call(
    method: str,
    path: str,
    status_code: Optional[int] = None,
    elapsed_ms: Optional[float] = None,
    **kwargs: Any,
) -> None:
    """
    Log an outbound call to the TreadX backend.

    Args:
        method: HTTP method
        path: Request path
        status_code: Response status code, None on transport error
        elapsed_ms: Round-trip time in milliseconds
        **kwargs: Additional fields
    """
    fields: dict[str, Any] = {"component": "backend", "method": method, "path": path}
    if status_code is not None:
        fields["status_code"] = status_code
    if elapsed_ms is not None:
        fields["elapsed_ms"] = round(elapsed_ms, 1)
    fields.update(kwargs)

    level = logging.INFO if status_code is not None and status_code < 400 else logging.WARNING
    _logger.log(level, " | ".join(f"{k}={v!r}" for k, v in fields.items()))


# Export logger instance for direct use by adapters
logger = _logger
