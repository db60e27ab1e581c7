"""Dependency injection factory functions."""

from typing import Any, Optional

from app.adapters.outbound.backend_api import (
    BackendClient,
    HttpIdentityProvider,
    HttpLeadGateway,
    HttpVendorGateway,
)
from app.adapters.outbound.in_memory import (
    InMemoryBackendStore,
    InMemoryLeadGateway,
    InMemoryVendorGateway,
    StaticIdentityProvider,
)
from app.adapters.outbound.transition_lock import InMemoryTransitionLock, RedisTransitionLock
from app.adapters.outbound.wizard_state import (
    InMemoryWizardStateRepository,
    RedisWizardStateRepository,
)
from app.application.ports.identity_provider import IdentityProvider
from app.application.ports.lead_gateway import LeadGateway
from app.application.ports.transition_lock import TransitionLock
from app.application.ports.vendor_gateway import VendorGateway
from app.application.ports.wizard_state_repository import WizardStateRepository
from app.application.use_cases.convert_lead_to_vendor import ConvertLeadToVendor
from app.application.use_cases.manage_lead_lifecycle import LeadLifecycleService
from app.application.use_cases.manage_vendors import ManageVendors
from app.application.use_cases.run_wizard import RunWizard
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import (
    log_event,
    log_rejection,
    log_transition,
    log_wizard_step,
)


def _logger_func(user_id: Optional[str], request_id: str, component: str, **kwargs: Any) -> None:
    """Route use case log events to the structured logging helpers."""
    if component == "rejection":
        log_rejection(user_id, request_id, kwargs.pop("kind"), kwargs.pop("reason"), **kwargs)
    elif component == "lifecycle":
        log_transition(user_id, request_id, kwargs.pop("entity_id"), kwargs.pop("action"), **kwargs)
    elif component == "wizard":
        log_wizard_step(user_id, request_id, kwargs.pop("wizard_id"), **kwargs)
    else:
        log_event(user_id, request_id, component, **kwargs)


def _check_backend_mode() -> None:
    if settings.backend_mode not in ("in_memory", "http"):
        raise ValueError(f"Unknown BACKEND_MODE: {settings.backend_mode}")


def create_backend_client() -> BackendClient:
    """
    Factory function to create the TreadX backend client.

    Returns:
        BackendClient instance
    """
    if not settings.backend_base_url:
        raise ValueError("BACKEND_BASE_URL is required when BACKEND_MODE=http")
    return BackendClient(
        settings.backend_base_url,
        timeout_seconds=settings.backend_timeout_seconds,
        territory_code=settings.territory_code,
    )


def create_lead_gateway(
    store: Optional[InMemoryBackendStore] = None,
    client: Optional[BackendClient] = None,
) -> LeadGateway:
    """
    Factory function to create lead gateway.

    Args:
        store: In-memory store shared with the vendor gateway
        client: Backend client shared with the other HTTP adapters

    Returns:
        LeadGateway instance
    """
    _check_backend_mode()
    if settings.backend_mode == "http":
        return HttpLeadGateway(client or create_backend_client())
    return InMemoryLeadGateway(store)


def create_vendor_gateway(
    store: Optional[InMemoryBackendStore] = None,
    client: Optional[BackendClient] = None,
) -> VendorGateway:
    """
    Factory function to create vendor gateway.

    Returns:
        VendorGateway instance
    """
    _check_backend_mode()
    if settings.backend_mode == "http":
        return HttpVendorGateway(client or create_backend_client())
    return InMemoryVendorGateway(store)


def create_identity_provider(client: Optional[BackendClient] = None) -> IdentityProvider:
    """
    Factory function to create identity provider.

    Returns:
        IdentityProvider instance (backend users endpoint or demo users)
    """
    _check_backend_mode()
    if settings.backend_mode == "http":
        return HttpIdentityProvider(client or create_backend_client(), settings.territory_code)
    return StaticIdentityProvider(territory_code=settings.territory_code)


def create_wizard_state_repository() -> WizardStateRepository:
    """
    Factory function to create wizard state repository.

    Returns:
        WizardStateRepository instance
    """
    if settings.wizard_state_repository == "redis":
        if not settings.redis_url:
            raise ValueError("REDIS_URL is required when WIZARD_STATE_REPOSITORY=redis")
        return RedisWizardStateRepository(settings.redis_url, settings.wizard_state_ttl_seconds)
    else:
        return InMemoryWizardStateRepository()


def create_transition_lock() -> TransitionLock:
    """
    Factory function to create the in-flight transition lock.

    Returns:
        TransitionLock instance
    """
    if settings.transition_lock == "redis":
        if not settings.redis_url:
            raise ValueError("REDIS_URL is required when TRANSITION_LOCK=redis")
        return RedisTransitionLock(settings.redis_url)
    else:
        return InMemoryTransitionLock()


def create_lead_lifecycle_service(
    lead_gateway: LeadGateway, transition_lock: TransitionLock
) -> LeadLifecycleService:
    """
    Factory function to create LeadLifecycleService with dependencies.

    Returns:
        LeadLifecycleService instance
    """
    return LeadLifecycleService(
        lead_gateway,
        transition_lock,
        lock_ttl_seconds=settings.transition_lock_ttl_seconds,
        logger=_logger_func,
    )


def create_manage_vendors(
    vendor_gateway: VendorGateway, transition_lock: TransitionLock
) -> ManageVendors:
    """
    Factory function to create ManageVendors with dependencies.

    Returns:
        ManageVendors instance
    """
    return ManageVendors(
        vendor_gateway,
        transition_lock,
        lock_ttl_seconds=settings.transition_lock_ttl_seconds,
        logger=_logger_func,
    )


def create_convert_lead_to_vendor(
    lead_gateway: LeadGateway,
    vendor_gateway: VendorGateway,
    transition_lock: TransitionLock,
) -> ConvertLeadToVendor:
    """
    Factory function to create ConvertLeadToVendor with dependencies.

    Returns:
        ConvertLeadToVendor instance
    """
    return ConvertLeadToVendor(
        lead_gateway,
        vendor_gateway,
        transition_lock,
        lock_ttl_seconds=settings.transition_lock_ttl_seconds,
        candidate_page_size=settings.candidate_page_size,
        logger=_logger_func,
    )


def create_run_wizard(
    lifecycle_service: LeadLifecycleService,
    conversion_service: ConvertLeadToVendor,
) -> RunWizard:
    """
    Factory function to create RunWizard with dependencies.

    Returns:
        RunWizard instance
    """
    return RunWizard(
        create_wizard_state_repository(),
        lifecycle_service,
        conversion_service,
        logger=_logger_func,
    )
