"""Lead gateway backed by the TreadX REST API."""

from typing import Optional

from app.adapters.outbound.backend_api.client import BackendClient
from app.adapters.outbound.backend_api.models import LeadPayload, PagePayload
from app.application.dtos.lead import InitiateContactRequest, LeadRequest, LeadValidationRequest
from app.application.ports.lead_gateway import LeadGateway
from app.domain.entities.lead import Lead, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.value_objects.page import Page, PageParams


def _wire(request) -> dict:
    return request.model_dump(mode="json", by_alias=True, exclude_none=True)


class HttpLeadGateway(LeadGateway):
    """HTTP implementation of the lead gateway."""

    def __init__(self, client: BackendClient) -> None:
        """
        Initialize HTTP lead gateway.

        Args:
            client: TreadX backend client
        """
        self._client = client

    async def create_lead(self, session: UserSession, request: LeadRequest) -> Lead:
        data = await self._client.request(
            "POST",
            "/leads",
            session,
            multipart={"lead": _wire(request)},
            default_error="Failed to create lead",
        )
        return LeadPayload.parse(data).to_entity()

    async def get_lead(self, session: UserSession, lead_id: str) -> Lead:
        data = await self._client.request(
            "GET",
            f"/leads/{lead_id}",
            session,
            default_error="Failed to fetch lead",
            not_found=("lead", lead_id),
        )
        return LeadPayload.parse(data).to_entity()

    async def list_leads(self, session: UserSession, params: PageParams) -> Page[Lead]:
        data = await self._client.request(
            "GET",
            "/leads",
            session,
            params=params.to_query(),
            default_error="Failed to fetch leads",
        )
        return PagePayload.parse(data).to_page(LeadPayload)

    async def get_leads_by_status(
        self, session: UserSession, status: LeadStatus, params: PageParams
    ) -> Page[Lead]:
        data = await self._client.request(
            "GET",
            "/leads/status",
            session,
            params=params.to_query(status=status.value),
            default_error="Failed to fetch leads by status",
        )
        return PagePayload.parse(data).to_page(LeadPayload)

    async def get_my_leads(
        self,
        session: UserSession,
        params: PageParams,
        status: Optional[LeadStatus] = None,
    ) -> Page[Lead]:
        data = await self._client.request(
            "GET",
            "/leads/my-leads",
            session,
            params=params.to_query(status=status.value if status else None),
            default_error="Failed to fetch my leads",
        )
        return PagePayload.parse(data).to_page(LeadPayload)

    async def update_lead(self, session: UserSession, lead_id: str, request: LeadRequest) -> Lead:
        data = await self._client.request(
            "PUT",
            f"/leads/{lead_id}",
            session,
            multipart={"lead": _wire(request)},
            default_error="Failed to update lead",
            not_found=("lead", lead_id),
        )
        return LeadPayload.parse(data).to_entity()

    async def validate_lead(
        self, session: UserSession, lead_id: str, request: LeadValidationRequest
    ) -> Lead:
        data = await self._client.request(
            "PUT",
            f"/leads/{lead_id}/validate",
            session,
            json_body=_wire(request),
            default_error="Failed to validate lead",
            not_found=("lead", lead_id),
        )
        return LeadPayload.parse(data).to_entity()

    async def initiate_contact(
        self, session: UserSession, lead_id: str, request: InitiateContactRequest
    ) -> Lead:
        data = await self._client.request(
            "POST",
            f"/leads/{lead_id}/initiate-contact",
            session,
            json_body=_wire(request),
            default_error="Failed to initiate contact",
            not_found=("lead", lead_id),
        )
        return LeadPayload.parse(data).to_entity()

    async def take_lead(self, session: UserSession, lead_id: str) -> Lead:
        data = await self._client.request(
            "POST",
            f"/leads/{lead_id}/take",
            session,
            default_error="Failed to take lead",
            not_found=("lead", lead_id),
        )
        return LeadPayload.parse(data).to_entity()

    async def delete_lead(self, session: UserSession, lead_id: str) -> None:
        await self._client.request(
            "DELETE",
            f"/leads/{lead_id}",
            session,
            default_error="Failed to delete lead",
            not_found=("lead", lead_id),
        )
