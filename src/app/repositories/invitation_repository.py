from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import (
    EntityType,
    Invitation,
    InvitationPermissions,
    InvitationStats,
    InvitationStatus,
)


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID (always re-read from the database)"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        pass

    @abstractmethod
    async def get_pending_by_target_and_email(
        self, target_type: EntityType, target_id: UUID, email: str
    ) -> Optional[Invitation]:
        """Get pending invitation for an address on a target"""
        pass

    @abstractmethod
    async def list_pending_by_target(
        self, target_type: EntityType, target_id: UUID
    ) -> List[Invitation]:
        """Get all pending invitations on a target"""
        pass

    @abstractmethod
    async def list_pending_by_email(self, email: str) -> List[Invitation]:
        """Get all pending invitations addressed to an email"""
        pass

    @abstractmethod
    async def get_stats_by_workspace(self, workspace_id: UUID) -> InvitationStats:
        """Outcome counts of every invitation in a workspace"""
        pass

    @abstractmethod
    async def get_stats_by_target(
        self, target_type: EntityType, target_id: UUID
    ) -> InvitationStats:
        """Outcome counts of the invitations on one target"""
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def transition_status(
        self,
        invitation_id: UUID,
        new_status: InvitationStatus,
        now: datetime,
        invitee_user_id: Optional[UUID] = None,
    ) -> bool:
        """
        Move a pending invitation to new_status.

        Single conditional UPDATE keyed on status = pending. Returns False when
        no row changed (already terminal, or lost a race).
        """
        pass

    @abstractmethod
    async def rotate_token(
        self,
        invitation_id: UUID,
        token: str,
        now: datetime,
        expires_at: Optional[datetime] = None,
        reminder: bool = False,
    ) -> bool:
        """
        Replace the token of a pending invitation.

        With reminder=True also bumps reminder_count and stamps
        reminder_sent_at. Returns False when the invitation is not pending.
        """
        pass

    @abstractmethod
    async def create_permissions(
        self, permissions: InvitationPermissions
    ) -> InvitationPermissions:
        """Attach a capability override to an invitation"""
        pass

    @abstractmethod
    async def get_permissions(self, invitation_id: UUID) -> Optional[InvitationPermissions]:
        """Get the capability override of an invitation, if any"""
        pass
