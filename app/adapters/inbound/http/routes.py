"""HTTP routes."""

from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, Header, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.inbound.http.schemas import SessionResponse
from app.application.dtos.lead import (
    InitiateContactRequest,
    LeadDetailResponse,
    LeadRequest,
    LeadResponse,
    LeadValidationRequest,
)
from app.application.dtos.page import PageResponse
from app.application.dtos.vendor import VendorRequest, VendorResponse
from app.application.dtos.wizard import (
    JumpRequest,
    SelectLeadRequest,
    StartWizardRequest,
    WizardFieldsRequest,
    WizardSubmitResponse,
    WizardView,
)
from app.domain.entities.lead import Lead, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import VendorStatus
from app.domain.value_objects.page import PageParams
from app.infrastructure.logging.logger import log_event
from app.infrastructure.wiring.container import container

router = APIRouter()

_bearer = HTTPBearer(auto_error=False)

# Services (wired with dependencies)
_identity_provider = container.identity_provider
_lifecycle_service = container.lifecycle_service
_vendor_service = container.vendor_service
_conversion_service = container.conversion_service
_wizard_service = container.wizard_service


def get_request_id(x_request_id: Optional[str] = Header(None)) -> str:
    """Correlation id for the request, generated unless the caller sent one."""
    return x_request_id or str(uuid4())


async def get_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    request_id: str = Depends(get_request_id),
) -> UserSession:
    """
    Resolve the caller's session from the bearer token.

    A missing token yields an anonymous session; every role check then fails
    with PermissionDenied.

    Returns:
        UserSession for the request
    """
    if credentials is None:
        session = UserSession.anonymous()
    else:
        session = await _identity_provider.resolve(credentials.credentials)

    log_event(
        user_id=session.user_id,
        request_id=request_id,
        component="http",
        method=request.method,
        path=request.url.path,
        role=session.role.value if session.role else None,
    )
    return session


def get_page_params(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    sort_by: str = Query("createdAt", alias="sortBy"),
    direction: str = Query("desc", pattern="^(asc|desc)$"),
    search: Optional[str] = Query(None),
) -> PageParams:
    """Page request parameters from the query string."""
    return PageParams(page=page, size=size, sort_by=sort_by, direction=direction, search=search)


def _lead_page(page) -> PageResponse[LeadResponse]:
    return PageResponse[LeadResponse].from_page(page, LeadResponse)


def _vendor_page(page) -> PageResponse[VendorResponse]:
    return PageResponse[VendorResponse].from_page(page, VendorResponse)


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


@router.get("/session", response_model=SessionResponse)
async def current_session(session: UserSession = Depends(get_session)) -> SessionResponse:
    """Identity and canonical role of the caller."""
    return SessionResponse(
        user_id=session.user_id,
        display_name=session.display_name,
        role=session.role.value if session.role else None,
        authenticated=session.is_authenticated,
    )


# Leads


@router.post("/leads", status_code=status.HTTP_201_CREATED, response_model=LeadResponse)
async def create_lead(
    request: LeadRequest,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> LeadResponse:
    """Submit a new lead; it enters the PENDING queue."""
    lead = await _lifecycle_service.create_lead(session, request, request_id=request_id)
    return LeadResponse.model_validate(lead)


@router.get("/leads", response_model=PageResponse[LeadResponse])
async def list_leads(
    lead_status: Optional[LeadStatus] = Query(None, alias="status"),
    session: UserSession = Depends(get_session),
    params: PageParams = Depends(get_page_params),
) -> PageResponse[LeadResponse]:
    """All leads, optionally narrowed to one status."""
    if lead_status is None:
        page = await _lifecycle_service.list_leads(session, params)
    else:
        page = await _lifecycle_service.get_leads_by_status(session, lead_status, params)
    return _lead_page(page)


@router.get("/leads/pending", response_model=PageResponse[LeadResponse])
async def pending_leads(
    session: UserSession = Depends(get_session),
    params: PageParams = Depends(get_page_params),
) -> PageResponse[LeadResponse]:
    """PENDING queue as seen by the caller's role."""
    page = await _lifecycle_service.pending_queue(session, params)
    return _lead_page(page)


@router.get("/leads/mine", response_model=PageResponse[LeadResponse])
async def my_leads(
    lead_status: Optional[LeadStatus] = Query(None, alias="status"),
    session: UserSession = Depends(get_session),
    params: PageParams = Depends(get_page_params),
) -> PageResponse[LeadResponse]:
    """Leads the caller added or was assigned."""
    page = await _lifecycle_service.get_my_leads(session, params, status=lead_status)
    return _lead_page(page)


@router.get("/leads/{lead_id}", response_model=LeadDetailResponse)
async def get_lead(
    lead_id: str, session: UserSession = Depends(get_session)
) -> LeadDetailResponse:
    """One lead with the actions the caller may perform on it."""
    lead, actions = await _lifecycle_service.get_lead_with_actions(session, lead_id)
    return LeadDetailResponse(
        lead=LeadResponse.model_validate(lead),
        permitted_actions=[action.value for action in actions],
    )


@router.put("/leads/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: str,
    request: LeadRequest,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> LeadResponse:
    """Edit a lead's fields; its status is never changed here."""
    lead = await _lifecycle_service.update_lead(session, lead_id, request, request_id=request_id)
    return LeadResponse.model_validate(lead)


@router.delete("/leads/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lead(
    lead_id: str,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> None:
    await _lifecycle_service.delete_lead(session, lead_id, request_id=request_id)


@router.put("/leads/{lead_id}/validate", response_model=LeadResponse)
async def validate_lead(
    lead_id: str,
    request: LeadValidationRequest,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> LeadResponse:
    """Approve or deny a PENDING lead (management only)."""
    lead = await _lifecycle_service.validate_lead(session, lead_id, request, request_id=request_id)
    return LeadResponse.model_validate(lead)


@router.post("/leads/{lead_id}/initiate-contact", response_model=LeadResponse)
async def initiate_contact(
    lead_id: str,
    request: InitiateContactRequest,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> LeadResponse:
    """Record the first contact with an APPROVED lead."""
    lead = await _lifecycle_service.initiate_contact(
        session, lead_id, request, request_id=request_id
    )
    return LeadResponse.model_validate(lead)


@router.post("/leads/{lead_id}/take", response_model=LeadResponse)
async def take_lead(
    lead_id: str,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> LeadResponse:
    """Assign a lead to the caller."""
    lead = await _lifecycle_service.take_lead(session, lead_id, request_id=request_id)
    return LeadResponse.model_validate(lead)


# Vendors


@router.get("/vendors", response_model=PageResponse[VendorResponse])
async def list_vendors(
    vendor_status: Optional[VendorStatus] = Query(None, alias="status"),
    session: UserSession = Depends(get_session),
    params: PageParams = Depends(get_page_params),
) -> PageResponse[VendorResponse]:
    page = await _vendor_service.list_vendors(session, params, status=vendor_status)
    return _vendor_page(page)


@router.get("/vendors/search", response_model=PageResponse[VendorResponse])
async def search_vendors(
    query: str = Query(""),
    session: UserSession = Depends(get_session),
    params: PageParams = Depends(get_page_params),
) -> PageResponse[VendorResponse]:
    """Search vendors by name, email or phone; a blank query lists them all."""
    page = await _vendor_service.search_vendors(session, query, params)
    return _vendor_page(page)


@router.get("/vendors/conversion-candidates", response_model=PageResponse[LeadResponse])
async def conversion_candidates(
    page: int = Query(0, ge=0),
    search: Optional[str] = Query(None),
    session: UserSession = Depends(get_session),
) -> PageResponse[LeadResponse]:
    """CONTACTED leads that can be converted into vendors."""
    candidates = await _conversion_service.list_candidates(session, page=page, search=search)
    return _lead_page(candidates)


@router.post("/vendors", status_code=status.HTTP_201_CREATED, response_model=VendorResponse)
async def create_vendor(
    request: VendorRequest,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> VendorResponse:
    """
    Create a vendor.

    A request carrying ``leadId`` is a conversion: the lead must be
    CONTACTED and is advanced by the backend in the same call.
    """
    if request.lead_id is not None:
        vendor = await _conversion_service.convert(session, request, request_id=request_id)
    else:
        vendor = await _vendor_service.create_vendor(session, request, request_id=request_id)
    return VendorResponse.model_validate(vendor)


@router.get("/vendors/{vendor_id}", response_model=VendorResponse)
async def get_vendor(
    vendor_id: str, session: UserSession = Depends(get_session)
) -> VendorResponse:
    vendor = await _vendor_service.get_vendor(session, vendor_id)
    return VendorResponse.model_validate(vendor)


@router.put("/vendors/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_id: str,
    request: VendorRequest,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> VendorResponse:
    vendor = await _vendor_service.update_vendor(session, vendor_id, request, request_id=request_id)
    return VendorResponse.model_validate(vendor)


@router.post("/vendors/{vendor_id}/toggle-status", response_model=VendorResponse)
async def toggle_vendor_status(
    vendor_id: str,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> VendorResponse:
    """Flip a vendor between ACTIVE and INACTIVE."""
    vendor = await _vendor_service.toggle_status(session, vendor_id, request_id=request_id)
    return VendorResponse.model_validate(vendor)


@router.delete("/vendors/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vendor(
    vendor_id: str,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> None:
    await _vendor_service.delete_vendor(session, vendor_id, request_id=request_id)


# Wizards


@router.post("/wizards", status_code=status.HTTP_201_CREATED, response_model=WizardView)
async def start_wizard(
    request: StartWizardRequest,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> WizardView:
    """Start a lead creation, lead edit or vendor conversion wizard."""
    return await _wizard_service.start(
        session, request.kind, lead_id=request.lead_id, request_id=request_id
    )


@router.get("/wizards/{wizard_id}", response_model=WizardView)
async def get_wizard(wizard_id: str, session: UserSession = Depends(get_session)) -> WizardView:
    return await _wizard_service.get(session, wizard_id)


@router.patch("/wizards/{wizard_id}/fields", response_model=WizardView)
async def set_wizard_fields(
    wizard_id: str,
    request: WizardFieldsRequest,
    session: UserSession = Depends(get_session),
) -> WizardView:
    """Merge field values entered on the current step."""
    return await _wizard_service.set_fields(session, wizard_id, request.values)


@router.post("/wizards/{wizard_id}/next", response_model=WizardView)
async def next_step(
    wizard_id: str,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> WizardView:
    """Advance when the current step validates; otherwise report its errors."""
    return await _wizard_service.next(session, wizard_id, request_id=request_id)


@router.post("/wizards/{wizard_id}/previous", response_model=WizardView)
async def previous_step(
    wizard_id: str,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> WizardView:
    return await _wizard_service.previous(session, wizard_id, request_id=request_id)


@router.post("/wizards/{wizard_id}/jump", response_model=WizardView)
async def jump_to_step(
    wizard_id: str,
    request: JumpRequest,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> WizardView:
    """Go back from the review step to an earlier step."""
    return await _wizard_service.jump(
        session, wizard_id, request.step_index, request_id=request_id
    )


@router.post("/wizards/{wizard_id}/select-lead", response_model=WizardView)
async def select_lead(
    wizard_id: str,
    request: SelectLeadRequest,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> WizardView:
    """Pick the CONTACTED lead a vendor wizard converts."""
    return await _wizard_service.select_lead(
        session, wizard_id, request.lead_id, request_id=request_id
    )


@router.post("/wizards/{wizard_id}/submit", response_model=WizardSubmitResponse)
async def submit_wizard(
    wizard_id: str,
    session: UserSession = Depends(get_session),
    request_id: str = Depends(get_request_id),
) -> WizardSubmitResponse:
    """
    Submit a wizard from its review step.

    On failure the wizard stays on review with ``submitError`` set and the
    error is returned; fetch the wizard to show it.
    """
    view = await _wizard_service.get(session, wizard_id)
    entity = await _wizard_service.submit(session, wizard_id, request_id=request_id)
    if isinstance(entity, Lead):
        return WizardSubmitResponse(
            wizard_id=wizard_id, kind=view.kind, lead=LeadResponse.model_validate(entity)
        )
    return WizardSubmitResponse(
        wizard_id=wizard_id, kind=view.kind, vendor=VendorResponse.model_validate(entity)
    )
