"""Vendor management use case."""

from typing import Any, Callable, Optional

from app.application.dtos.vendor import VendorRequest
from app.application.ports.transition_lock import TransitionLock
from app.application.ports.vendor_gateway import VendorGateway
from app.application.use_cases.in_flight import in_flight
from app.application.use_cases.user_messages import UserMessages
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import VENDOR_REQUIRED_FIELDS, Vendor, VendorStatus
from app.domain.errors import SalesConsoleError, ValidationFailed
from app.domain.policies.vendor_permissions import VendorAction, ensure_vendor_allowed
from app.domain.value_objects.field_formats import validate_email
from app.domain.value_objects.page import Page, PageParams

_REQUIRED_MESSAGES = {
    "legal_name": UserMessages.LEGAL_NAME_REQUIRED,
    "business_name": UserMessages.BUSINESS_NAME_REQUIRED,
    "email": UserMessages.EMAIL_REQUIRED,
    "phone_number": UserMessages.PHONE_NUMBER_REQUIRED,
    "street_number": UserMessages.STREET_NUMBER_REQUIRED,
    "street_name": UserMessages.STREET_NAME_REQUIRED,
    "postal_code": UserMessages.POSTAL_CODE_REQUIRED,
}


def vendor_payload_errors(values: dict[str, Any]) -> dict[str, str]:
    """
    Check the required vendor fields and the email format.

    Args:
        values: Field name to value mapping (snake_case names)

    Returns:
        Field name to message mapping, empty when valid
    """
    errors = {}
    for name in VENDOR_REQUIRED_FIELDS:
        value = values.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[name] = _REQUIRED_MESSAGES[name]
    if "email" not in errors and not validate_email(values.get("email") or ""):
        errors["email"] = UserMessages.EMAIL_INVALID
    return errors


class ManageVendors:
    """Use case for the vendor management table."""

    def __init__(
        self,
        vendor_gateway: VendorGateway,
        transition_lock: TransitionLock,
        lock_ttl_seconds: int = 60,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize vendor management use case.

        Args:
            vendor_gateway: Gateway to the vendor persistence service
            transition_lock: In-flight guard keyed by vendor id
            lock_ttl_seconds: Lifetime of an in-flight marker
            logger: Optional logger function (user_id, request_id, component, **kwargs)
        """
        self._vendor_gateway = vendor_gateway
        self._transition_lock = transition_lock
        self._lock_ttl_seconds = lock_ttl_seconds
        self._logger = logger

    def _log(self, session: UserSession, request_id: Optional[str], component: str, **kwargs: Any) -> None:
        """Log event if logger is available."""
        if self._logger:
            self._logger(session.user_id, request_id or "unknown", component, **kwargs)

    def _check(
        self,
        session: UserSession,
        action: VendorAction,
        request_id: Optional[str],
        request: Optional[VendorRequest] = None,
    ) -> None:
        try:
            ensure_vendor_allowed(session, action)
            if request is not None:
                errors = vendor_payload_errors(request.field_values())
                if errors:
                    raise ValidationFailed(errors)
        except SalesConsoleError as exc:
            self._log(
                session,
                request_id,
                "rejection",
                action=f"vendor_{action.value}",
                kind=exc.kind,
                reason=exc.message,
            )
            raise

    async def get_vendor(self, session: UserSession, vendor_id: str) -> Vendor:
        self._check(session, VendorAction.VIEW, None)
        return await self._vendor_gateway.get_vendor(session, vendor_id)

    async def list_vendors(
        self,
        session: UserSession,
        params: PageParams,
        status: Optional[VendorStatus] = None,
    ) -> Page[Vendor]:
        self._check(session, VendorAction.VIEW, None)
        return await self._vendor_gateway.list_vendors(session, params, status=status)

    async def search_vendors(self, session: UserSession, query: str, params: PageParams) -> Page[Vendor]:
        """
        Search vendors by legal name, business name, email or phone.

        A blank query falls back to the plain listing.
        """
        self._check(session, VendorAction.VIEW, None)
        if not query.strip():
            return await self._vendor_gateway.list_vendors(session, params)
        return await self._vendor_gateway.search_vendors(session, query.strip(), params)

    async def create_vendor(
        self, session: UserSession, request: VendorRequest, request_id: Optional[str] = None
    ) -> Vendor:
        """
        Create a vendor directly, without a source lead.

        Conversions from a lead go through ConvertLeadToVendor instead.

        Raises:
            PermissionDenied: If the caller has no sales role
            ValidationFailed: If a required field is missing or the email is malformed
        """
        self._check(session, VendorAction.CREATE, request_id, request)
        if request.lead_id is not None:
            request = request.model_copy(update={"lead_id": None})
        vendor = await self._vendor_gateway.create_vendor(session, request)
        self._log(
            session,
            request_id,
            "vendor",
            action="vendor_create",
            entity_id=vendor.id,
            vendor_unique_id=vendor.vendor_unique_id,
        )
        return vendor

    async def update_vendor(
        self,
        session: UserSession,
        vendor_id: str,
        request: VendorRequest,
        request_id: Optional[str] = None,
    ) -> Vendor:
        """
        Replace a vendor's fields.

        Raises:
            PermissionDenied: If the caller has no sales role
            ValidationFailed: If a required field is missing or the email is malformed
            NotFound: If the vendor does not exist
        """
        self._check(session, VendorAction.UPDATE, request_id, request)
        if request.lead_id is not None:
            request = request.model_copy(update={"lead_id": None})
        async with in_flight(self._transition_lock, "vendor", vendor_id, self._lock_ttl_seconds):
            vendor = await self._vendor_gateway.update_vendor(session, vendor_id, request)
        self._log(session, request_id, "vendor", action="vendor_update", entity_id=vendor_id)
        return vendor

    async def toggle_status(
        self, session: UserSession, vendor_id: str, request_id: Optional[str] = None
    ) -> Vendor:
        """
        Flip a vendor between ACTIVE and INACTIVE.

        Args:
            session: Caller session
            vendor_id: Vendor identifier
            request_id: Optional request identifier for logging

        Returns:
            Vendor with its new status, as returned by the gateway

        Raises:
            PermissionDenied: If the caller is not a manager or admin
            NotFound: If the vendor does not exist
        """
        self._check(session, VendorAction.TOGGLE_STATUS, request_id)
        async with in_flight(self._transition_lock, "vendor", vendor_id, self._lock_ttl_seconds):
            vendor = await self._vendor_gateway.get_vendor(session, vendor_id)
            request = VendorRequest.model_validate(vendor).model_copy(
                update={"status": vendor.toggled_status, "lead_id": None}
            )
            updated = await self._vendor_gateway.update_vendor(session, vendor_id, request)
        self._log(
            session,
            request_id,
            "vendor",
            action="vendor_toggle_status",
            entity_id=vendor_id,
            status_before=vendor.status.value,
            status_after=updated.status.value,
        )
        return updated

    async def delete_vendor(
        self, session: UserSession, vendor_id: str, request_id: Optional[str] = None
    ) -> None:
        self._check(session, VendorAction.DELETE, request_id)
        async with in_flight(self._transition_lock, "vendor", vendor_id, self._lock_ttl_seconds):
            await self._vendor_gateway.delete_vendor(session, vendor_id)
        self._log(session, request_id, "vendor", action="vendor_delete", entity_id=vendor_id)
