"""HTTP client for the TreadX REST backend."""

import json
import re
import time
from typing import Any, Optional

import httpx

from app.domain.entities.user_session import UserSession
from app.domain.errors import (
    Conflict,
    NotFound,
    PermissionDenied,
    SalesConsoleError,
    TransportFailure,
    ValidationFailed,
)
from app.infrastructure.logging.logger import log_backend_call

API_PREFIX = "/api/v1"


def _to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def error_message(response: httpx.Response, default: str) -> str:
    """
    Extract the backend's error text.

    Prefers the body's ``message``, then ``error``, then the default.

    Args:
        response: Failed response
        default: Message used when the body carries none

    Returns:
        Error text, verbatim from the backend when available
    """
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or default
    return default


def map_error(
    response: httpx.Response,
    default: str,
    not_found: Optional[tuple[str, str]] = None,
) -> SalesConsoleError:
    """
    Map a failed backend response to a domain error.

    Args:
        response: Failed response (status >= 400)
        default: Message used when the body carries none
        not_found: Optional (entity, id) reported on 404

    Returns:
        Domain error to raise
    """
    message = error_message(response, default)
    status_code = response.status_code

    if status_code in (400, 422):
        field_errors: dict[str, str] = {}
        try:
            body = response.json()
        except ValueError:
            body = {}
        raw_errors = body.get("fieldErrors") or body.get("errors") if isinstance(body, dict) else None
        if isinstance(raw_errors, dict):
            field_errors = {_to_snake(name): str(text) for name, text in raw_errors.items()}
        return ValidationFailed(field_errors, message=message)
    if status_code == 403:
        return PermissionDenied(message)
    if status_code == 404:
        entity, entity_id = not_found or ("resource", str(response.request.url.path))
        return NotFound(entity, entity_id)
    if status_code == 409:
        return Conflict(message)
    return TransportFailure(message, status_code=status_code)


class BackendClient:
    """Async client for the TreadX REST API.

    Every call carries the caller's bearer token and, when known, the
    territory header. Calls are never retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        territory_code: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize backend client.

        Args:
            base_url: Backend base URL (e.g. "https://api.treadx.example")
            timeout_seconds: Request timeout in seconds
            territory_code: Default X-Territory-Code when the session has none
            transport: Optional httpx transport (used by tests)
        """
        if not base_url:
            raise ValueError("Backend base URL is required")
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._territory_code = territory_code
        self._transport = transport

    def _headers(self, session: Optional[UserSession], token: Optional[str] = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        bearer = token or (session.token if session else None)
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        territory = (session.territory_code if session else None) or self._territory_code
        if territory:
            headers["X-Territory-Code"] = territory
        return headers

    async def request(
        self,
        method: str,
        path: str,
        session: Optional[UserSession] = None,
        *,
        token: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
        multipart: Optional[dict[str, Any]] = None,
        default_error: str = "Request failed",
        not_found: Optional[tuple[str, str]] = None,
    ) -> Any:
        """
        Issue one backend request.

        Args:
            method: HTTP method
            path: Path under ``/api/v1``
            session: Caller session (token and territory)
            token: Explicit bearer token, used before a session exists
            params: Query parameters
            json_body: JSON body
            multipart: JSON parts sent as multipart/form-data
            default_error: Message used when a failure body carries none
            not_found: Optional (entity, id) reported on 404

        Returns:
            Decoded JSON body, or None for an empty response

        Raises:
            SalesConsoleError: Mapped from the response status
            TransportFailure: On network errors or a non-JSON success body
        """
        url = f"{API_PREFIX}{path}"
        files = None
        if multipart is not None:
            files = {
                name: (f"{name}.json", json.dumps(part), "application/json")
                for name, part in multipart.items()
            }

        started = time.monotonic()
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json_body,
                    files=files,
                    headers=self._headers(session, token),
                )
        except httpx.HTTPError as exc:
            log_backend_call(method, url, error=type(exc).__name__)
            raise TransportFailure(f"{default_error}: {exc}") from exc

        log_backend_call(
            method,
            url,
            status_code=response.status_code,
            elapsed_ms=(time.monotonic() - started) * 1000,
        )
        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise TransportFailure(
                    f"{default_error}: backend returned a non-JSON body",
                    status_code=response.status_code,
                ) from exc
        raise map_error(response, default_error, not_found)
