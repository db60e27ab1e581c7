"""Dependency injection container."""

from typing import Optional

from app.adapters.outbound.backend_api import BackendClient
from app.adapters.outbound.in_memory import InMemoryBackendStore
from app.application.ports.identity_provider import IdentityProvider
from app.application.ports.lead_gateway import LeadGateway
from app.application.ports.transition_lock import TransitionLock
from app.application.ports.vendor_gateway import VendorGateway
from app.application.use_cases.convert_lead_to_vendor import ConvertLeadToVendor
from app.application.use_cases.manage_lead_lifecycle import LeadLifecycleService
from app.application.use_cases.manage_vendors import ManageVendors
from app.application.use_cases.run_wizard import RunWizard
from app.infrastructure.config.settings import settings
from app.infrastructure.wiring.dependencies import (
    create_backend_client,
    create_convert_lead_to_vendor,
    create_identity_provider,
    create_lead_gateway,
    create_lead_lifecycle_service,
    create_manage_vendors,
    create_run_wizard,
    create_transition_lock,
    create_vendor_gateway,
)


class Container:
    """Dependency injection container.

    Gateways share one backend: the same in-memory store, or the same
    backend client, so that a vendor creation and its lead are seen together.
    """

    def __init__(self) -> None:
        """Initialize container with dependencies."""
        store: Optional[InMemoryBackendStore] = None
        client: Optional[BackendClient] = None
        if settings.backend_mode == "http":
            client = create_backend_client()
        else:
            store = InMemoryBackendStore()

        # Gateways
        self._lead_gateway: LeadGateway = create_lead_gateway(store=store, client=client)
        self._vendor_gateway: VendorGateway = create_vendor_gateway(store=store, client=client)
        self._identity_provider: IdentityProvider = create_identity_provider(client=client)
        self._transition_lock: TransitionLock = create_transition_lock()

        # Use cases
        self._lifecycle_service = create_lead_lifecycle_service(
            self._lead_gateway, self._transition_lock
        )
        self._vendor_service = create_manage_vendors(self._vendor_gateway, self._transition_lock)
        self._conversion_service = create_convert_lead_to_vendor(
            self._lead_gateway, self._vendor_gateway, self._transition_lock
        )
        self._wizard_service = create_run_wizard(self._lifecycle_service, self._conversion_service)

    @property
    def identity_provider(self) -> IdentityProvider:
        """Get identity provider."""
        return self._identity_provider

    @property
    def lifecycle_service(self) -> LeadLifecycleService:
        """Get lead lifecycle service."""
        return self._lifecycle_service

    @property
    def vendor_service(self) -> ManageVendors:
        """Get vendor management service."""
        return self._vendor_service

    @property
    def conversion_service(self) -> ConvertLeadToVendor:
        """Get vendor conversion service."""
        return self._conversion_service

    @property
    def wizard_service(self) -> RunWizard:
        """Get wizard session service."""
        return self._wizard_service


# Global container instance
container = Container()
