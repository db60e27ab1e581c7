"""Vendor gateway port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.application.dtos.vendor import VendorRequest
from app.domain.entities.user_session import UserSession
from app.domain.entities.vendor import Vendor, VendorStatus
from app.domain.value_objects.page import Page, PageParams


class VendorGateway(ABC):
    """Port interface for the vendor persistence service."""

    @abstractmethod
    async def create_vendor(self, session: UserSession, request: VendorRequest) -> Vendor:
        """
        Create a vendor.

        When ``request.lead_id`` is set the backend links the vendor to that
        lead and advances the lead past CONTACTED in the same operation.

        Args:
            session: Caller session
            request: Vendor payload

        Returns:
            Created vendor with its server-generated unique id
        """
        pass

    @abstractmethod
    async def get_vendor(self, session: UserSession, vendor_id: str) -> Vendor:
        """
        Get a vendor by id.

        Raises:
            NotFound: If the vendor does not exist
        """
        pass

    @abstractmethod
    async def list_vendors(
        self,
        session: UserSession,
        params: PageParams,
        status: Optional[VendorStatus] = None,
    ) -> Page[Vendor]:
        """
        List vendors, optionally restricted to one status.

        Args:
            session: Caller session
            params: Page, sort and search parameters
            status: Optional status filter

        Returns:
            Page of vendors
        """
        pass

    @abstractmethod
    async def search_vendors(
        self, session: UserSession, query: str, params: PageParams
    ) -> Page[Vendor]:
        """
        Search vendors by name, email or phone.

        Args:
            session: Caller session
            query: Free-text query
            params: Page parameters

        Returns:
            Page of matching vendors
        """
        pass

    @abstractmethod
    async def update_vendor(
        self, session: UserSession, vendor_id: str, request: VendorRequest
    ) -> Vendor:
        """
        Replace a vendor's fields.

        Args:
            session: Caller session
            vendor_id: Vendor identifier
            request: Vendor payload

        Returns:
            Updated vendor
        """
        pass

    @abstractmethod
    async def delete_vendor(self, session: UserSession, vendor_id: str) -> None:
        """
        Delete a vendor.

        Args:
            session: Caller session
            vendor_id: Vendor identifier
        """
        pass
