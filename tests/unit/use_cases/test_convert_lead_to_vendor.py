"""Unit tests for the lead to vendor conversion workflow."""

import asyncio

import pytest

from app.adapters.outbound.in_memory import (
    InMemoryBackendStore,
    InMemoryLeadGateway,
    InMemoryVendorGateway,
)
from app.adapters.outbound.transition_lock import InMemoryTransitionLock
from app.application.dtos.vendor import VendorRequest
from app.application.ports.vendor_gateway import VendorGateway
from app.application.use_cases.convert_lead_to_vendor import ConvertLeadToVendor, draft_from_lead
from app.application.use_cases.user_messages import UserMessages
from app.domain.entities.lead import ContactMethod, Lead, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import VendorStatus
from app.domain.errors import Conflict, NotFound, TransitionInFlight, TransportFailure, ValidationFailed
from app.domain.value_objects.page import Page
from app.domain.value_objects.role_id import RoleId

AGENT = UserSession(user_id="u-agent", role=RoleId.SALES_AGENT)


def contacted_lead(lead_id: str = "1", **overrides) -> Lead:
    values = {
        "id": lead_id,
        "business_name": "Acme",
        "phone_number": "+1 (555) 045-6789",
        "street_number": "456",
        "street_name": "Oak Avenue",
        "apt_unit_bldg": "Unit 2",
        "postal_code": "L4C 2N8",
        "status": LeadStatus.CONTACTED,
        "contact_method": ContactMethod.PHONE,
        "contact_method_details": "555-0123",
    }
    values.update(overrides)
    return Lead(**values)


class FailingVendorGateway(InMemoryVendorGateway):
    """Vendor gateway whose creation always fails upstream."""

    def __init__(self, store: InMemoryBackendStore) -> None:
        super().__init__(store)
        self.create_calls = 0

    async def create_vendor(self, session, request):
        self.create_calls += 1
        raise TransportFailure("Failed to create vendor", status_code=500)


class StaleListingLeadGateway(InMemoryLeadGateway):
    """Lead gateway whose status listing also returns leads in other states."""

    async def get_leads_by_status(self, session, status, params):
        leads = list(self.store.leads.values())
        return Page(content=leads, total_elements=len(leads), total_pages=1, size=params.size, number=0)


class SlowReadLeadGateway(InMemoryLeadGateway):
    """Lead gateway whose reads yield long enough for a second conversion to start."""

    async def get_lead(self, session, lead_id):
        lead = await super().get_lead(session, lead_id)
        await asyncio.sleep(0.01)
        return lead


@pytest.fixture
def store():
    backend = InMemoryBackendStore()
    backend.leads["1"] = contacted_lead("1")
    backend.leads["2"] = contacted_lead("2", business_name="Beta Tires")
    backend.leads["3"] = Lead(id="3", business_name="Gamma", phone_number="5550000000", status=LeadStatus.APPROVED)
    return backend


def make_service(store, vendor_gateway: VendorGateway = None, lead_gateway=None, lock=None):
    return ConvertLeadToVendor(
        lead_gateway or InMemoryLeadGateway(store),
        vendor_gateway or InMemoryVendorGateway(store),
        lock or InMemoryTransitionLock(),
        candidate_page_size=5,
    )


def complete_request(lead_id: str = "1", **overrides) -> VendorRequest:
    draft = draft_from_lead(contacted_lead(lead_id))
    return draft.model_copy(update={"email": "info@acme.ca", **overrides})


def test_draft_copies_lead_fields_and_leaves_email_blank():
    lead = contacted_lead()

    draft = draft_from_lead(lead)

    assert draft.lead_id == "1"
    assert draft.legal_name == "Acme"
    assert draft.business_name == "Acme"
    assert draft.email == ""
    assert draft.phone_number == lead.phone_number
    assert draft.apt_unit_bldg == "Unit 2"
    assert draft.status == VendorStatus.ACTIVE
    assert lead.status == LeadStatus.CONTACTED


@pytest.mark.asyncio
async def test_candidates_are_contacted_leads_only(store):
    service = make_service(store, lead_gateway=StaleListingLeadGateway(store))

    page = await service.list_candidates(AGENT)

    assert [lead.id for lead in page.content] == ["1", "2"]
    assert page.total_elements == 2


@pytest.mark.asyncio
async def test_load_draft_rejects_lead_that_is_not_contacted(store):
    service = make_service(store)

    with pytest.raises(Conflict):
        await service.load_draft(AGENT, "3")
    with pytest.raises(NotFound):
        await service.load_draft(AGENT, "99")


@pytest.mark.asyncio
async def test_convert_creates_vendor_and_onboards_lead(store):
    service = make_service(store)

    vendor = await service.convert(AGENT, complete_request())

    assert vendor.vendor_unique_id == "VND-ACME-001"
    assert vendor.lead_id == "1"
    lead = store.leads["1"]
    assert lead.status == LeadStatus.ONBOARDED
    assert lead.vendor_id == vendor.id
    assert lead.vendor_unique_id == vendor.vendor_unique_id


@pytest.mark.asyncio
async def test_convert_requires_email_and_lead(store):
    service = make_service(store)

    with pytest.raises(ValidationFailed) as exc_info:
        await service.convert(AGENT, complete_request(email="", lead_id=None))

    assert exc_info.value.field_errors["email"] == UserMessages.EMAIL_REQUIRED
    assert exc_info.value.field_errors["lead_id"] == UserMessages.LEAD_SELECTION_REQUIRED
    assert store.vendors == {}


@pytest.mark.asyncio
async def test_failed_creation_leaves_lead_contacted(store):
    vendor_gateway = FailingVendorGateway(store)
    service = make_service(store, vendor_gateway=vendor_gateway)

    with pytest.raises(TransportFailure):
        await service.convert(AGENT, complete_request())

    assert vendor_gateway.create_calls == 1
    assert store.leads["1"].status == LeadStatus.CONTACTED
    assert store.leads["1"].vendor_id is None


@pytest.mark.asyncio
async def test_converted_lead_cannot_be_converted_again(store):
    service = make_service(store)
    await service.convert(AGENT, complete_request())

    with pytest.raises(Conflict):
        await service.convert(AGENT, complete_request())
    assert len(store.vendors) == 1


@pytest.mark.asyncio
async def test_conversion_in_flight_is_refused(store):
    lock = InMemoryTransitionLock()
    await lock.acquire("lead:1", 60)
    service = make_service(store, lock=lock)

    with pytest.raises(TransitionInFlight):
        await service.convert(AGENT, complete_request())
    assert store.vendors == {}


@pytest.mark.asyncio
async def test_concurrent_conversions_create_one_vendor(store):
    service = make_service(store, lead_gateway=SlowReadLeadGateway(store))

    results = await asyncio.gather(
        service.convert(AGENT, complete_request()),
        service.convert(AGENT, complete_request()),
        return_exceptions=True,
    )

    assert isinstance(results[1], TransitionInFlight)
    assert len(store.vendors) == 1
    assert store.leads["1"].status == LeadStatus.ONBOARDED
