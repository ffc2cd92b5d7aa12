from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invitation_activity_repository import IInvitationActivityRepository
from src.domain.entities import InvitationActivity


class InvitationActivityRepository(IInvitationActivityRepository):
    """InvitationActivity repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, activity: InvitationActivity) -> InvitationActivity:
        """Create a new activity row (immutable)"""
        self.session.add(activity)
        await self.session.flush()
        return activity

    async def list_by_invitation(self, invitation_id: UUID) -> List[InvitationActivity]:
        """Activity of one invitation, oldest first"""
        stmt = (
            select(InvitationActivity)
            .where(InvitationActivity.invitation_id == invitation_id)
            .order_by(InvitationActivity.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
