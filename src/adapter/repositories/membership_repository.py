from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.membership_repository import IMembershipRepository
from src.domain.entities import MEMBER_MODELS, EntityType, MemberBase, MemberRole, TeamMember
from src.domain.errors import DuplicateMembershipError


class MembershipRepository(IMembershipRepository):
    """Membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(
        self, entity_type: EntityType, entity_id: UUID, user_id: UUID
    ) -> Optional[MemberBase]:
        """Get the direct membership of a user on an entity"""
        model = MEMBER_MODELS[entity_type]
        stmt = select(model).where(model.entity_id == entity_id, model.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_entity(self, entity_type: EntityType, entity_id: UUID) -> List[MemberBase]:
        """Get all direct memberships on an entity"""
        model = MEMBER_MODELS[entity_type]
        stmt = select(model).where(model.entity_id == entity_id).order_by(model.joined_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_user(self, entity_type: EntityType, user_id: UUID) -> List[MemberBase]:
        """Get all direct memberships of a user on entities of one type"""
        model = MEMBER_MODELS[entity_type]
        stmt = select(model).where(model.user_id == user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_role(
        self, entity_type: EntityType, entity_id: UUID, role: MemberRole
    ) -> int:
        """Count direct members holding a role"""
        model = MEMBER_MODELS[entity_type]
        stmt = (
            select(func.count())
            .select_from(model)
            .where(model.entity_id == entity_id, model.role == role)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(
        self,
        entity_type: EntityType,
        entity_id: UUID,
        user_id: UUID,
        role: MemberRole,
        added_by_id: Optional[UUID] = None,
    ) -> MemberBase:
        """Create a new membership"""
        model = MEMBER_MODELS[entity_type]
        membership = model(
            entity_id=entity_id, user_id=user_id, role=role, added_by_id=added_by_id
        )
        self.session.add(membership)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateMembershipError(entity_type.value, entity_id, user_id) from exc
        await self.session.refresh(membership)
        return membership

    async def update_role(self, membership: MemberBase, role: MemberRole) -> MemberBase:
        """Change the role of an existing membership"""
        membership.role = role
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def delete(self, membership: MemberBase) -> None:
        """Hard-delete a membership"""
        await self.session.delete(membership)
        await self.session.flush()

    async def team_ids_for_user(self, user_id: UUID) -> Set[UUID]:
        """IDs of the teams the user belongs to"""
        stmt = select(TeamMember.entity_id).where(TeamMember.user_id == user_id)
        result = await self.session.execute(stmt)
        return set(result.scalars().all())
