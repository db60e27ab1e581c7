"""Unit tests for the TreadX backend client and HTTP adapters."""

import json

import httpx
import pytest

from app.adapters.outbound.backend_api import (
    BackendClient,
    HttpIdentityProvider,
    HttpLeadGateway,
    HttpVendorGateway,
)
from app.application.dtos.lead import InitiateContactRequest, LeadRequest, LeadValidationRequest
from app.application.dtos.vendor import VendorRequest
from app.domain.entities.lead import ContactMethod, LeadSource, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import VendorStatus
from app.domain.errors import (
    Conflict,
    NotFound,
    PermissionDenied,
    TransportFailure,
    ValidationFailed,
)
from app.domain.value_objects.page import PageParams
from app.domain.value_objects.role_id import RoleId

BASE_URL = "https://api.treadx.test"
SESSION = UserSession(user_id="5", role=RoleId.SALES_MANAGER, token="tok-123", territory_code="ON")

LEAD_JSON = {
    "id": 42,
    "businessName": "City Auto Repair",
    "phoneNumber": "+1 (555) 045-6789",
    "streetNumber": "456",
    "streetName": "Oak Avenue",
    "postalCode": "L4C 2N8",
    "source": "ADS",
    "status": "PENDING",
    "createdAt": [2024, 3, 15, 14, 30, 5],
}

VENDOR_JSON = {
    "id": 7,
    "vendorUniqueId": "VND-CITY-007",
    "legalName": "City Auto Repair Inc.",
    "businessName": "City Auto Repair",
    "email": "info@cityauto.ca",
    "phoneNumber": "+1 (555) 045-6789",
    "status": "ACTIVE",
}


class Recorder:
    """Mock transport handler that records requests and returns canned responses."""

    def __init__(self, status_code: int = 200, body=None) -> None:
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_client(handler) -> BackendClient:
    return BackendClient(BASE_URL, transport=httpx.MockTransport(handler))


def test_client_requires_base_url():
    with pytest.raises(ValueError):
        BackendClient("")


@pytest.mark.asyncio
async def test_request_sends_token_and_territory_headers():
    recorder = Recorder(body=LEAD_JSON)
    gateway = HttpLeadGateway(make_client(recorder))

    lead = await gateway.get_lead(SESSION, "42")

    assert lead.id == "42"
    assert lead.status == LeadStatus.PENDING
    assert recorder.last.url.path == "/api/v1/leads/42"
    assert recorder.last.headers["Authorization"] == "Bearer tok-123"
    assert recorder.last.headers["X-Territory-Code"] == "ON"


@pytest.mark.parametrize(
    "status_code, body, error_type",
    [
        (400, {"message": "Bad request", "fieldErrors": {"postalCode": "Invalid"}}, ValidationFailed),
        (403, {"message": "Access denied"}, PermissionDenied),
        (404, {"message": "Lead not found"}, NotFound),
        (409, {"message": "Lead has already been validated"}, Conflict),
        (500, {"error": "Internal Server Error"}, TransportFailure),
        (401, None, TransportFailure),
    ],
)
@pytest.mark.asyncio
async def test_status_codes_map_to_domain_errors(status_code, body, error_type):
    gateway = HttpLeadGateway(make_client(Recorder(status_code, body)))

    with pytest.raises(error_type):
        await gateway.get_lead(SESSION, "42")


@pytest.mark.asyncio
async def test_backend_message_is_passed_through_verbatim():
    gateway = HttpLeadGateway(make_client(Recorder(409, {"message": "Lead has already been validated"})))

    with pytest.raises(Conflict) as exc_info:
        await gateway.validate_lead(SESSION, "42", LeadValidationRequest(status=LeadStatus.APPROVED))
    assert exc_info.value.message == "Lead has already been validated"


@pytest.mark.asyncio
async def test_default_message_when_body_is_silent():
    gateway = HttpLeadGateway(make_client(Recorder(500)))

    with pytest.raises(TransportFailure) as exc_info:
        await gateway.take_lead(SESSION, "42")
    assert exc_info.value.message == "Failed to take lead"
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_field_errors_are_snake_cased():
    body = {"message": "Validation failed", "fieldErrors": {"postalCode": "Invalid postal code"}}
    gateway = HttpLeadGateway(make_client(Recorder(400, body)))

    with pytest.raises(ValidationFailed) as exc_info:
        await gateway.create_lead(SESSION, LeadRequest(business_name="Acme", source=LeadSource.ADS))
    assert exc_info.value.field_errors == {"postal_code": "Invalid postal code"}


@pytest.mark.asyncio
async def test_network_error_is_transport_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    gateway = HttpLeadGateway(make_client(handler))

    with pytest.raises(TransportFailure):
        await gateway.get_lead(SESSION, "42")


@pytest.mark.asyncio
async def test_create_lead_is_sent_as_multipart_json_part():
    recorder = Recorder(201, LEAD_JSON)
    gateway = HttpLeadGateway(make_client(recorder))

    await gateway.create_lead(
        SESSION,
        LeadRequest(business_name="City Auto Repair", phone_number="+1 (555) 045-6789", source=LeadSource.ADS),
    )

    request = recorder.last
    assert request.method == "POST"
    assert request.url.path == "/api/v1/leads"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    content = request.content.decode()
    assert 'name="lead"' in content
    assert '"businessName": "City Auto Repair"' in content


@pytest.mark.asyncio
async def test_validate_and_contact_bodies_are_camel_case_json():
    recorder = Recorder(body={**LEAD_JSON, "status": "APPROVED"})
    gateway = HttpLeadGateway(make_client(recorder))

    await gateway.validate_lead(SESSION, "42", LeadValidationRequest(status=LeadStatus.DENIED, notes="Duplicate"))
    assert recorder.last.method == "PUT"
    assert recorder.last.url.path == "/api/v1/leads/42/validate"
    assert json.loads(recorder.last.content) == {"status": "DENIED", "notes": "Duplicate"}

    await gateway.initiate_contact(
        SESSION,
        "42",
        InitiateContactRequest(contact_method=ContactMethod.PHONE, contact_method_details="555-0123"),
    )
    assert recorder.last.url.path == "/api/v1/leads/42/initiate-contact"
    body = json.loads(recorder.last.content)
    assert body["contactMethod"] == "PHONE"
    assert body["contactMethodDetails"] == "555-0123"


@pytest.mark.asyncio
async def test_status_listing_uses_query_parameters():
    page_body = {"content": [LEAD_JSON], "totalElements": 1, "totalPages": 1, "size": 5, "number": 0}
    recorder = Recorder(body=page_body)
    gateway = HttpLeadGateway(make_client(recorder))

    page = await gateway.get_leads_by_status(SESSION, LeadStatus.CONTACTED, PageParams(size=5, search="auto"))

    assert recorder.last.url.path == "/api/v1/leads/status"
    assert recorder.last.url.params["status"] == "CONTACTED"
    assert recorder.last.url.params["search"] == "auto"
    assert recorder.last.url.params["size"] == "5"
    assert page.total_elements == 1
    assert page.content[0].business_name == "City Auto Repair"


@pytest.mark.asyncio
async def test_delete_with_empty_body_returns_none():
    recorder = Recorder(204)
    gateway = HttpLeadGateway(make_client(recorder))

    assert await gateway.delete_lead(SESSION, "42") is None
    assert recorder.last.method == "DELETE"


@pytest.mark.asyncio
async def test_vendor_gateway_create_and_search():
    recorder = Recorder(201, VENDOR_JSON)
    gateway = HttpVendorGateway(make_client(recorder))

    vendor = await gateway.create_vendor(
        SESSION,
        VendorRequest(
            lead_id="42",
            legal_name="City Auto Repair Inc.",
            business_name="City Auto Repair",
            email="info@cityauto.ca",
        ),
    )

    assert vendor.id == "7"
    assert vendor.vendor_unique_id == "VND-CITY-007"
    assert json.loads(recorder.last.content)["leadId"] == "42"

    recorder.status_code = 200
    recorder.body = {"content": [VENDOR_JSON], "totalElements": 1, "totalPages": 1, "size": 10, "number": 0}
    page = await gateway.search_vendors(SESSION, "city", PageParams())
    assert recorder.last.url.path == "/api/v1/vendors/search"
    assert recorder.last.url.params["query"] == "city"
    assert page.content[0].status == VendorStatus.ACTIVE

    await gateway.list_vendors(SESSION, PageParams(), status=VendorStatus.INACTIVE)
    assert recorder.last.url.path == "/api/v1/vendors/status"
    assert recorder.last.url.params["status"] == "INACTIVE"


@pytest.mark.asyncio
async def test_identity_provider_builds_session_from_profile():
    recorder = Recorder(
        body={
            "id": 5,
            "email": "manager@treadx.com",
            "firstName": "Sam",
            "lastName": "Carter",
            "role": {"name": "manager"},
        }
    )
    provider = HttpIdentityProvider(make_client(recorder), territory_code="ON")

    session = await provider.resolve("tok-123")

    assert recorder.last.url.path == "/api/v1/users/me"
    assert recorder.last.headers["Authorization"] == "Bearer tok-123"
    assert session.user_id == "5"
    assert session.role == RoleId.SALES_MANAGER
    assert session.display_name == "Sam Carter"
    assert session.token == "tok-123"


@pytest.mark.parametrize("status_code", [401, 403])
@pytest.mark.asyncio
async def test_identity_provider_rejected_token_is_anonymous(status_code):
    provider = HttpIdentityProvider(make_client(Recorder(status_code, {"message": "Unauthorized"})))

    session = await provider.resolve("expired")

    assert session.is_authenticated is False


@pytest.mark.asyncio
async def test_identity_provider_server_error_propagates():
    provider = HttpIdentityProvider(make_client(Recorder(503)))

    with pytest.raises(TransportFailure):
        await provider.resolve("tok-123")


@pytest.mark.asyncio
async def test_non_json_success_body_is_transport_failure():
    def handler(request):
        return httpx.Response(200, text="<html>proxy</html>")

    gateway = HttpLeadGateway(make_client(handler))

    with pytest.raises(TransportFailure) as exc_info:
        await gateway.get_lead(SESSION, "42")
    assert exc_info.value.message == "Failed to fetch lead: backend returned a non-JSON body"
    assert exc_info.value.status_code == 200


@pytest.mark.asyncio
async def test_unreadable_lead_payload_is_transport_failure():
    gateway = HttpLeadGateway(make_client(Recorder(body={**LEAD_JSON, "createdAt": "15/03/2024"})))

    with pytest.raises(TransportFailure) as exc_info:
        await gateway.get_lead(SESSION, "42")
    assert "unreadable lead" in exc_info.value.message


@pytest.mark.asyncio
async def test_unreadable_page_item_is_transport_failure():
    page_body = {"content": [{**VENDOR_JSON, "status": "ARCHIVED"}], "totalElements": 1}
    gateway = HttpVendorGateway(make_client(Recorder(body=page_body)))

    with pytest.raises(TransportFailure) as exc_info:
        await gateway.list_vendors(SESSION, PageParams())
    assert "unreadable vendor" in exc_info.value.message
