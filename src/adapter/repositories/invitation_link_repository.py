from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invitation_link_repository import IInvitationLinkRepository
from src.domain.entities import EntityType, InvitationLinkSettings


class InvitationLinkRepository(IInvitationLinkRepository):
    """InvitationLinkSettings repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, settings: InvitationLinkSettings) -> InvitationLinkSettings:
        self.session.add(settings)
        await self.session.flush()
        await self.session.refresh(settings)
        return settings

    async def get_by_id(self, settings_id: UUID) -> Optional[InvitationLinkSettings]:
        stmt = (
            select(InvitationLinkSettings)
            .where(InvitationLinkSettings.id == settings_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(self, link_token: str) -> Optional[InvitationLinkSettings]:
        stmt = (
            select(InvitationLinkSettings)
            .where(InvitationLinkSettings.link_token == link_token)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_for_target(
        self, workspace_id: UUID, target_type: EntityType, target_id: UUID
    ) -> Optional[InvitationLinkSettings]:
        stmt = (
            select(InvitationLinkSettings)
            .where(
                InvitationLinkSettings.workspace_id == workspace_id,
                InvitationLinkSettings.target_type == target_type,
                InvitationLinkSettings.target_id == target_id,
                InvitationLinkSettings.is_active.is_(True),
            )
            .order_by(InvitationLinkSettings.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def deactivate_for_target(
        self, workspace_id: UUID, target_type: EntityType, target_id: UUID, now: datetime
    ) -> int:
        stmt = (
            update(InvitationLinkSettings)
            .where(
                InvitationLinkSettings.workspace_id == workspace_id,
                InvitationLinkSettings.target_type == target_type,
                InvitationLinkSettings.target_id == target_id,
                InvitationLinkSettings.is_active.is_(True),
            )
            .values(is_active=False, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def deactivate(self, settings_id: UUID, now: datetime) -> bool:
        stmt = (
            update(InvitationLinkSettings)
            .where(
                InvitationLinkSettings.id == settings_id,
                InvitationLinkSettings.is_active.is_(True),
            )
            .values(is_active=False, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def try_consume(self, settings_id: UUID, now: datetime) -> bool:
        """Compare-and-swap increment of use_count"""
        stmt = (
            update(InvitationLinkSettings)
            .where(
                InvitationLinkSettings.id == settings_id,
                InvitationLinkSettings.is_active.is_(True),
                or_(
                    InvitationLinkSettings.max_uses.is_(None),
                    InvitationLinkSettings.use_count < InvitationLinkSettings.max_uses,
                ),
                or_(
                    InvitationLinkSettings.expires_at.is_(None),
                    InvitationLinkSettings.expires_at > now,
                ),
            )
            .values(use_count=InvitationLinkSettings.use_count + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
