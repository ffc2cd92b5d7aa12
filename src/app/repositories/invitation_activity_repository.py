from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import InvitationActivity


class IInvitationActivityRepository(ABC):
    """InvitationActivity repository interface - application layer"""

    @abstractmethod
    async def create(self, activity: InvitationActivity) -> InvitationActivity:
        """Create a new activity row (immutable)"""
        pass

    @abstractmethod
    async def list_by_invitation(self, invitation_id: UUID) -> List[InvitationActivity]:
        """Activity of one invitation, oldest first"""
        pass
