"""Unit tests for persisted wizard sessions."""

import pytest

from app.adapters.outbound.in_memory import (
    InMemoryBackendStore,
    InMemoryLeadGateway,
    InMemoryVendorGateway,
)
from app.adapters.outbound.transition_lock import InMemoryTransitionLock
from app.adapters.outbound.wizard_state import InMemoryWizardStateRepository
from app.application.use_cases.convert_lead_to_vendor import ConvertLeadToVendor
from app.application.use_cases.manage_lead_lifecycle import LeadLifecycleService
from app.application.use_cases.run_wizard import RunWizard
from app.application.use_cases.user_messages import UserMessages
from app.domain.entities.lead import ContactMethod, Lead, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import Vendor
from app.domain.entities.wizard_state import WizardKind
from app.domain.errors import Conflict, NotFound, ValidationFailed
from app.domain.value_objects.role_id import RoleId

AGENT = UserSession(user_id="u-agent", first_name="Ahmad", last_name="Lounitch", role=RoleId.SALES_AGENT)
OTHER_AGENT = UserSession(user_id="u-agent-2", role=RoleId.SALES_AGENT)

LEAD_STEPS_INPUT = [
    {"business_name": "City Auto Repair"},
    {"phone_number": "5550456789"},
    {"street_number": "456", "street_name": "Oak Avenue", "postal_code": "l4c2n8"},
    {"source": "ADS", "source_url": "https://ads-platform.com/lead/456"},
    {"notes": "Small auto repair shop"},
]


@pytest.fixture
def store():
    backend = InMemoryBackendStore()
    backend.leads["10"] = Lead(
        id="10",
        business_name="Acme",
        phone_number="+1 (555) 012-3456",
        street_number="12",
        street_name="King Street",
        postal_code="M5H 1A1",
        status=LeadStatus.CONTACTED,
        contact_method=ContactMethod.PHONE,
        contact_method_details="555-0123",
    )
    return backend


@pytest.fixture
def repository():
    return InMemoryWizardStateRepository()


@pytest.fixture
def service(store, repository):
    lock = InMemoryTransitionLock()
    lead_gateway = InMemoryLeadGateway(store)
    vendor_gateway = InMemoryVendorGateway(store)
    return RunWizard(
        repository,
        LeadLifecycleService(lead_gateway, lock),
        ConvertLeadToVendor(lead_gateway, vendor_gateway, lock),
    )


@pytest.mark.asyncio
async def test_lead_wizard_end_to_end(service, repository, store):
    view = await service.start(AGENT, WizardKind.LEAD_CREATE)
    wizard_id = view.wizard_id

    for values in LEAD_STEPS_INPUT:
        await service.set_fields(AGENT, wizard_id, values)
        view = await service.next(AGENT, wizard_id)
        assert view.errors == {}

    assert view.current_step.key == "review"
    assert view.can_jump is True
    assert view.data["phone_number"] == "+1 (555) 045-6789"
    assert view.data["postal_code"] == "L4C 2N8"

    lead = await service.submit(AGENT, wizard_id)

    assert isinstance(lead, Lead)
    assert lead.status == LeadStatus.PENDING
    assert lead.postal_code == "L4C 2N8"
    assert await repository.get(wizard_id) is None


@pytest.mark.asyncio
async def test_next_returns_errors_without_advancing(service):
    view = await service.start(AGENT, WizardKind.LEAD_CREATE)

    view = await service.next(AGENT, view.wizard_id)

    assert view.step_index == 0
    assert view.errors == {"business_name": UserMessages.BUSINESS_NAME_REQUIRED}
    assert view.can_go_back is False


@pytest.mark.asyncio
async def test_jump_back_from_review_and_return(service):
    view = await service.start(AGENT, WizardKind.LEAD_CREATE)
    wizard_id = view.wizard_id
    for values in LEAD_STEPS_INPUT:
        await service.set_fields(AGENT, wizard_id, values)
        await service.next(AGENT, wizard_id)

    view = await service.jump(AGENT, wizard_id, 1)
    assert view.current_step.key == "contact"

    with pytest.raises(Conflict):
        await service.jump(AGENT, wizard_id, 0)


@pytest.mark.asyncio
async def test_wizard_of_another_user_is_not_found(service):
    view = await service.start(AGENT, WizardKind.LEAD_CREATE)

    with pytest.raises(NotFound):
        await service.get(OTHER_AGENT, view.wizard_id)
    with pytest.raises(NotFound):
        await service.next(AGENT, "missing")


@pytest.mark.asyncio
async def test_lead_edit_requires_lead_and_prefills_data(service):
    with pytest.raises(ValidationFailed):
        await service.start(AGENT, WizardKind.LEAD_EDIT)

    view = await service.start(AGENT, WizardKind.LEAD_EDIT, lead_id="10")

    assert view.lead_id == "10"
    assert view.data["business_name"] == "Acme"
    assert view.data["source"] == "GOVERNMENT"


@pytest.mark.asyncio
async def test_vendor_wizard_selects_lead_then_converts(service, store):
    view = await service.start(AGENT, WizardKind.VENDOR_CREATE)
    wizard_id = view.wizard_id
    assert view.current_step.key == "select-lead"

    view = await service.select_lead(AGENT, wizard_id, "10")
    assert view.data["legal_name"] == "Acme"
    assert view.data["email"] == ""

    view = await service.next(AGENT, wizard_id)
    assert view.current_step.key == "business"
    view = await service.next(AGENT, wizard_id)
    view = await service.next(AGENT, wizard_id)
    assert view.current_step.key == "contact"
    assert view.errors == {"email": UserMessages.EMAIL_REQUIRED}

    await service.set_fields(AGENT, wizard_id, {"email": "info@acme.ca"})
    await service.next(AGENT, wizard_id)
    view = await service.next(AGENT, wizard_id)
    assert view.current_step.key == "review"

    vendor = await service.submit(AGENT, wizard_id)

    assert isinstance(vendor, Vendor)
    assert vendor.legal_name == "Acme"
    assert store.leads["10"].status == LeadStatus.ONBOARDED


@pytest.mark.asyncio
async def test_vendor_wizard_started_from_lead_skips_picker(service):
    view = await service.start(AGENT, WizardKind.VENDOR_CREATE, lead_id="10")

    assert view.step_count == 4
    assert view.current_step.key == "business"
    assert view.lead_id == "10"


@pytest.mark.asyncio
async def test_select_lead_outside_picker_conflicts(service):
    view = await service.start(AGENT, WizardKind.VENDOR_CREATE, lead_id="10")

    with pytest.raises(Conflict):
        await service.select_lead(AGENT, view.wizard_id, "10")


@pytest.mark.asyncio
async def test_failed_submission_keeps_wizard_on_review(service, repository, store):
    view = await service.start(AGENT, WizardKind.VENDOR_CREATE, lead_id="10")
    wizard_id = view.wizard_id
    await service.set_fields(AGENT, wizard_id, {"email": "info@acme.ca"})
    for _ in range(3):
        await service.next(AGENT, wizard_id)

    # The lead moves on before the wizard is submitted
    store.leads["10"].status = LeadStatus.DONE

    with pytest.raises(Conflict):
        await service.submit(AGENT, wizard_id)

    view = await service.get(AGENT, wizard_id)
    assert view.current_step.key == "review"
    assert view.submit_error
    assert view.data["email"] == "info@acme.ca"
    assert (await repository.get(wizard_id)) is not None
