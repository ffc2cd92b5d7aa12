from abc import ABC, abstractmethod
from typing import List, Optional, Set
from uuid import UUID

from src.domain.entities import EntityType, MemberBase, MemberRole


class IMembershipRepository(ABC):
    """Membership repository interface - one table per entity type"""

    @abstractmethod
    async def get(
        self, entity_type: EntityType, entity_id: UUID, user_id: UUID
    ) -> Optional[MemberBase]:
        """Get the direct membership of a user on an entity"""
        pass

    @abstractmethod
    async def list_by_entity(self, entity_type: EntityType, entity_id: UUID) -> List[MemberBase]:
        """Get all direct memberships on an entity"""
        pass

    @abstractmethod
    async def list_by_user(self, entity_type: EntityType, user_id: UUID) -> List[MemberBase]:
        """Get all direct memberships of a user on entities of one type"""
        pass

    @abstractmethod
    async def count_by_role(
        self, entity_type: EntityType, entity_id: UUID, role: MemberRole
    ) -> int:
        """Count direct members holding a role"""
        pass

    @abstractmethod
    async def create(
        self,
        entity_type: EntityType,
        entity_id: UUID,
        user_id: UUID,
        role: MemberRole,
        added_by_id: Optional[UUID] = None,
    ) -> MemberBase:
        """
        Create a new membership.

        Raises DuplicateMembershipError if the (entity, user) pair exists.
        """
        pass

    @abstractmethod
    async def update_role(self, membership: MemberBase, role: MemberRole) -> MemberBase:
        """Change the role of an existing membership"""
        pass

    @abstractmethod
    async def delete(self, membership: MemberBase) -> None:
        """Hard-delete a membership"""
        pass

    @abstractmethod
    async def team_ids_for_user(self, user_id: UUID) -> Set[UUID]:
        """IDs of the teams the user belongs to"""
        pass
