from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import AccessRequest, AccessRequestStatus, EntityType


class IAccessRequestRepository(ABC):
    """AccessRequest repository interface - application layer"""

    @abstractmethod
    async def create(self, access_request: AccessRequest) -> AccessRequest:
        """Create a new access request"""
        pass

    @abstractmethod
    async def get_by_id(self, request_id: UUID) -> Optional[AccessRequest]:
        """Get access request by ID (always re-read from the database)"""
        pass

    @abstractmethod
    async def get_pending(
        self, target_type: EntityType, target_id: UUID, email: str
    ) -> Optional[AccessRequest]:
        """Get the pending request of an address on a target"""
        pass

    @abstractmethod
    async def list_by_target(
        self,
        target_type: EntityType,
        target_id: UUID,
        status: Optional[AccessRequestStatus] = None,
    ) -> List[AccessRequest]:
        """List requests on a target, newest first"""
        pass

    @abstractmethod
    async def list_by_requester(
        self,
        requester_id: UUID,
        email: Optional[str] = None,
        status: Optional[AccessRequestStatus] = None,
    ) -> List[AccessRequest]:
        """List requests made by a user or from their address, newest first"""
        pass

    @abstractmethod
    async def transition_status(
        self,
        request_id: UUID,
        new_status: AccessRequestStatus,
        processed_by_id: UUID,
        now: datetime,
        denial_reason: Optional[str] = None,
    ) -> bool:
        """
        Move a pending request to new_status.

        Single conditional UPDATE keyed on status = pending. Returns False when
        no row changed.
        """
        pass
