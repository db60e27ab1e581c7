"""Vendor gateway backed by the TreadX REST API."""

from typing import Optional

from app.adapters.outbound.backend_api.client import BackendClient
from app.adapters.outbound.backend_api.models import PagePayload, VendorPayload
from app.application.dtos.vendor import VendorRequest
from app.application.ports.vendor_gateway import VendorGateway
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import Vendor, VendorStatus
from app.domain.value_objects.page import Page, PageParams


class HttpVendorGateway(VendorGateway):
    """HTTP implementation of the vendor gateway."""

    def __init__(self, client: BackendClient) -> None:
        """
        Initialize HTTP vendor gateway.

        Args:
            client: TreadX backend client
        """
        self._client = client

    async def create_vendor(self, session: UserSession, request: VendorRequest) -> Vendor:
        data = await self._client.request(
            "POST",
            "/vendors",
            session,
            json_body=request.model_dump(mode="json", by_alias=True, exclude_none=True),
            default_error="Failed to create vendor",
            not_found=("lead", request.lead_id or ""),
        )
        return VendorPayload.parse(data).to_entity()

    async def get_vendor(self, session: UserSession, vendor_id: str) -> Vendor:
        data = await self._client.request(
            "GET",
            f"/vendors/{vendor_id}",
            session,
            default_error="Failed to fetch vendor",
            not_found=("vendor", vendor_id),
        )
        return VendorPayload.parse(data).to_entity()

    async def list_vendors(
        self,
        session: UserSession,
        params: PageParams,
        status: Optional[VendorStatus] = None,
    ) -> Page[Vendor]:
        if status is not None:
            path, query = "/vendors/status", params.to_query(status=status.value)
        else:
            path, query = "/vendors", params.to_query()
        data = await self._client.request(
            "GET", path, session, params=query, default_error="Failed to fetch vendors"
        )
        return PagePayload.parse(data).to_page(VendorPayload)

    async def search_vendors(
        self, session: UserSession, query: str, params: PageParams
    ) -> Page[Vendor]:
        data = await self._client.request(
            "GET",
            "/vendors/search",
            session,
            params=params.to_query(query=query),
            default_error="Failed to search vendors",
        )
        return PagePayload.parse(data).to_page(VendorPayload)

    async def update_vendor(
        self, session: UserSession, vendor_id: str, request: VendorRequest
    ) -> Vendor:
        data = await self._client.request(
            "PUT",
            f"/vendors/{vendor_id}",
            session,
            json_body=request.model_dump(mode="json", by_alias=True, exclude_none=True),
            default_error="Failed to update vendor",
            not_found=("vendor", vendor_id),
        )
        return VendorPayload.parse(data).to_entity()

    async def delete_vendor(self, session: UserSession, vendor_id: str) -> None:
        await self._client.request(
            "DELETE",
            f"/vendors/{vendor_id}",
            session,
            default_error="Failed to delete vendor",
            not_found=("vendor", vendor_id),
        )
