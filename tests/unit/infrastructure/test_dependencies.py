"""Unit tests for dependency wiring and structured logging."""

import logging
from unittest.mock import patch

import pytest

from app.adapters.outbound.backend_api import HttpIdentityProvider, HttpLeadGateway, HttpVendorGateway
from app.adapters.outbound.in_memory import (
    InMemoryBackendStore,
    InMemoryLeadGateway,
    StaticIdentityProvider,
)
from app.adapters.outbound.transition_lock import InMemoryTransitionLock, RedisTransitionLock
from app.adapters.outbound.wizard_state import (
    InMemoryWizardStateRepository,
    RedisWizardStateRepository,
)
from app.infrastructure.config.settings import settings
from app.infrastructure.wiring import dependencies
from app.infrastructure.wiring.dependencies import (
    create_identity_provider,
    create_lead_gateway,
    create_transition_lock,
    create_vendor_gateway,
    create_wizard_state_repository,
)


def test_in_memory_gateways_share_the_given_store():
    store = InMemoryBackendStore()

    with patch.object(settings, "backend_mode", "in_memory"):
        lead_gateway = create_lead_gateway(store=store)
        vendor_gateway = create_vendor_gateway(store=store)

    assert isinstance(lead_gateway, InMemoryLeadGateway)
    assert lead_gateway.store is store
    assert vendor_gateway.store is store
    assert isinstance(create_identity_provider(), StaticIdentityProvider)


def test_http_mode_builds_backend_adapters():
    with patch.object(settings, "backend_mode", "http"), patch.object(
        settings, "backend_base_url", "https://api.treadx.test"
    ):
        assert isinstance(create_lead_gateway(), HttpLeadGateway)
        assert isinstance(create_vendor_gateway(), HttpVendorGateway)
        assert isinstance(create_identity_provider(), HttpIdentityProvider)


def test_http_mode_requires_base_url():
    with patch.object(settings, "backend_mode", "http"), patch.object(settings, "backend_base_url", ""):
        with pytest.raises(ValueError, match="BACKEND_BASE_URL"):
            create_lead_gateway()


def test_unknown_backend_mode_is_rejected():
    with patch.object(settings, "backend_mode", "sqlite"):
        with pytest.raises(ValueError, match="Unknown BACKEND_MODE"):
            create_vendor_gateway()


def test_redis_adapters_selected_by_settings():
    with patch.object(settings, "wizard_state_repository", "redis"), patch.object(
        settings, "transition_lock", "redis"
    ), patch.object(settings, "redis_url", "redis://localhost:6379/1"):
        assert isinstance(create_wizard_state_repository(), RedisWizardStateRepository)
        assert isinstance(create_transition_lock(), RedisTransitionLock)

    assert isinstance(create_wizard_state_repository(), InMemoryWizardStateRepository)
    assert isinstance(create_transition_lock(), InMemoryTransitionLock)


def test_redis_without_url_is_rejected():
    with patch.object(settings, "transition_lock", "redis"), patch.object(settings, "redis_url", ""):
        with pytest.raises(ValueError, match="REDIS_URL"):
            create_transition_lock()


@pytest.mark.parametrize(
    "component, kwargs, helper",
    [
        ("rejection", {"kind": "permission_denied", "reason": "Access denied"}, "log_rejection"),
        ("lifecycle", {"entity_id": "42", "action": "approve"}, "log_transition"),
        ("wizard", {"wizard_id": "w-1", "step_index": 2}, "log_wizard_step"),
        ("conversion", {"lead_id": "42"}, "log_event"),
    ],
)
def test_logger_func_dispatches_by_component(component, kwargs, helper):
    with patch.object(dependencies, helper) as mock_helper:
        dependencies._logger_func("u-agent", "req-1", component, **kwargs)

    mock_helper.assert_called_once()
    assert mock_helper.call_args.args[:2] == ("u-agent", "req-1")


def test_transition_is_logged_as_key_value_pairs(caplog):
    with caplog.at_level(logging.INFO, logger="treadx_sales_console"):
        dependencies._logger_func(
            "u-manager",
            "req-2",
            "lifecycle",
            entity_id="42",
            action="approve",
            status_before="PENDING",
            status_after="APPROVED",
        )

    message = caplog.records[-1].getMessage()
    assert "user_id='u-manager'" in message
    assert "request_id='req-2'" in message
    assert "status_after='APPROVED'" in message
