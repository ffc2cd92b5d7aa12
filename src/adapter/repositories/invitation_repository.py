from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invitation_repository import IInvitationRepository
from src.domain.entities import (
    EntityType,
    Invitation,
    InvitationPermissions,
    InvitationStats,
    InvitationStatus,
)


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = (
            select(Invitation)
            .where(Invitation.id == invitation_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        stmt = (
            select(Invitation)
            .where(Invitation.token == token)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending_by_target_and_email(
        self, target_type: EntityType, target_id: UUID, email: str
    ) -> Optional[Invitation]:
        """Get pending invitation for an address on a target"""
        stmt = select(Invitation).where(
            Invitation.target_type == target_type,
            Invitation.target_id == target_id,
            Invitation.email == email,
            Invitation.status == InvitationStatus.pending,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_pending_by_target(
        self, target_type: EntityType, target_id: UUID
    ) -> List[Invitation]:
        """Get all pending invitations on a target"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.target_type == target_type,
                Invitation.target_id == target_id,
                Invitation.status == InvitationStatus.pending,
            )
            .order_by(Invitation.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_pending_by_email(self, email: str) -> List[Invitation]:
        """Get all pending invitations addressed to an email"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.email == email,
                Invitation.status == InvitationStatus.pending,
            )
            .order_by(Invitation.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _stats(self, *conditions) -> InvitationStats:
        stmt = (
            select(Invitation.status, func.count(Invitation.id))
            .where(*conditions)
            .group_by(Invitation.status)
        )
        result = await self.session.execute(stmt)
        counts = {InvitationStatus(status): count for status, count in result.all()}

        stmt = select(Invitation.created_at, Invitation.accepted_at).where(
            *conditions,
            Invitation.status == InvitationStatus.accepted,
            Invitation.accepted_at.is_not(None),
        )
        result = await self.session.execute(stmt)
        hours = [
            (accepted - created).total_seconds() / 3600 for created, accepted in result.all()
        ]

        return InvitationStats.from_counts(counts, hours)

    async def get_stats_by_workspace(self, workspace_id: UUID) -> InvitationStats:
        """Outcome counts of every invitation in a workspace"""
        return await self._stats(Invitation.workspace_id == workspace_id)

    async def get_stats_by_target(
        self, target_type: EntityType, target_id: UUID
    ) -> InvitationStats:
        """Outcome counts of the invitations on one target"""
        return await self._stats(
            Invitation.target_type == target_type, Invitation.target_id == target_id
        )

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def transition_status(
        self,
        invitation_id: UUID,
        new_status: InvitationStatus,
        now: datetime,
        invitee_user_id: Optional[UUID] = None,
    ) -> bool:
        """Conditional pending -> new_status update"""
        values = {"status": new_status, "updated_at": now}
        if new_status == InvitationStatus.accepted:
            values["accepted_at"] = now
            values["invitee_user_id"] = invitee_user_id
        elif new_status == InvitationStatus.declined:
            values["declined_at"] = now
            if invitee_user_id is not None:
                values["invitee_user_id"] = invitee_user_id

        stmt = (
            update(Invitation)
            .where(
                Invitation.id == invitation_id,
                Invitation.status == InvitationStatus.pending,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def rotate_token(
        self,
        invitation_id: UUID,
        token: str,
        now: datetime,
        expires_at: Optional[datetime] = None,
        reminder: bool = False,
    ) -> bool:
        """Replace the token of a pending invitation"""
        values = {"token": token, "updated_at": now}
        if expires_at is not None:
            values["expires_at"] = expires_at
        if reminder:
            values["reminder_count"] = Invitation.reminder_count + 1
            values["reminder_sent_at"] = now

        stmt = (
            update(Invitation)
            .where(
                Invitation.id == invitation_id,
                Invitation.status == InvitationStatus.pending,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def create_permissions(
        self, permissions: InvitationPermissions
    ) -> InvitationPermissions:
        """Attach a capability override to an invitation"""
        self.session.add(permissions)
        await self.session.flush()
        await self.session.refresh(permissions)
        return permissions

    async def get_permissions(self, invitation_id: UUID) -> Optional[InvitationPermissions]:
        """Get the capability override of an invitation, if any"""
        stmt = select(InvitationPermissions).where(
            InvitationPermissions.invitation_id == invitation_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
