"""Lead gateway port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.application.dtos.lead import InitiateContactRequest, LeadRequest, LeadValidationRequest
from app.domain.entities.lead import Lead, LeadStatus
from app.domain.entities.user_session import UserSession
from app.domain.value_objects.page import Page, PageParams


class LeadGateway(ABC):
    """Port interface for the lead persistence service.

    Each call is atomic server-side and is never retried by the caller.
    Implementations raise the domain error kinds (NotFound, Conflict,
    PermissionDenied, ValidationFailed, TransportFailure).
    """

    @abstractmethod
    async def create_lead(self, session: UserSession, request: LeadRequest) -> Lead:
        """
        Create a lead in PENDING status.

        Args:
            session: Caller session
            request: Lead payload

        Returns:
            Created lead
        """
        pass

    @abstractmethod
    async def get_lead(self, session: UserSession, lead_id: str) -> Lead:
        """
        Get a lead by id.

        Args:
            session: Caller session
            lead_id: Lead identifier

        Returns:
            Lead entity

        Raises:
            NotFound: If the lead does not exist
        """
        pass

    @abstractmethod
    async def list_leads(self, session: UserSession, params: PageParams) -> Page[Lead]:
        """
        List leads, newest first by default.

        Args:
            session: Caller session
            params: Page, sort and search parameters

        Returns:
            Page of leads
        """
        pass

    @abstractmethod
    async def get_leads_by_status(
        self, session: UserSession, status: LeadStatus, params: PageParams
    ) -> Page[Lead]:
        """
        List leads in one status.

        Args:
            session: Caller session
            status: Status filter
            params: Page, sort and search parameters

        Returns:
            Page of leads
        """
        pass

    @abstractmethod
    async def get_my_leads(
        self,
        session: UserSession,
        params: PageParams,
        status: Optional[LeadStatus] = None,
    ) -> Page[Lead]:
        """
        List leads added by or assigned to the caller.

        Args:
            session: Caller session
            params: Page, sort and search parameters
            status: Optional status filter

        Returns:
            Page of leads
        """
        pass

    @abstractmethod
    async def update_lead(self, session: UserSession, lead_id: str, request: LeadRequest) -> Lead:
        """
        Replace a lead's descriptive fields. Status is never changed.

        Args:
            session: Caller session
            lead_id: Lead identifier
            request: Lead payload

        Returns:
            Updated lead
        """
        pass

    @abstractmethod
    async def validate_lead(
        self, session: UserSession, lead_id: str, request: LeadValidationRequest
    ) -> Lead:
        """
        Record a manager's APPROVED/DENIED decision.

        Args:
            session: Caller session
            lead_id: Lead identifier
            request: Decision and notes

        Returns:
            Validated lead
        """
        pass

    @abstractmethod
    async def initiate_contact(
        self, session: UserSession, lead_id: str, request: InitiateContactRequest
    ) -> Lead:
        """
        Record the first contact with an approved lead.

        Args:
            session: Caller session
            lead_id: Lead identifier
            request: Contact method and details

        Returns:
            Contacted lead
        """
        pass

    @abstractmethod
    async def take_lead(self, session: UserSession, lead_id: str) -> Lead:
        """
        Assign a manager-seeded lead to the calling agent.

        Args:
            session: Caller session
            lead_id: Lead identifier

        Returns:
            Assigned lead
        """
        pass

    @abstractmethod
    async def delete_lead(self, session: UserSession, lead_id: str) -> None:
        """
        Delete a lead.

        Args:
            session: Caller session
            lead_id: Lead identifier
        """
        pass
