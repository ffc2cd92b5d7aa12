from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from libs.field_update import FieldUpdate
from src.domain.access import EntityNode
from src.domain.entities import EntityType


class IEntityRepository(ABC):
    """Entity store interface - read access to the containment hierarchy"""

    @abstractmethod
    async def get(self, entity_type: EntityType, entity_id: UUID) -> Optional[EntityNode]:
        """Get one entity as a detached node"""
        pass

    @abstractmethod
    async def get_many(
        self, entity_type: EntityType, entity_ids: Iterable[UUID]
    ) -> List[EntityNode]:
        """Get all entities of one type with the given IDs"""
        pass

    @abstractmethod
    async def list_children(
        self, child_type: EntityType, parent_type: EntityType, parent_ids: Iterable[UUID]
    ) -> List[EntityNode]:
        """
        List entities of child_type whose parent is one of parent_ids.

        Projects under a space are only those without a folder.
        """
        pass

    @abstractmethod
    async def list_allow_listed(
        self, entity_type: EntityType, user_id: UUID, team_ids: Iterable[UUID]
    ) -> List[EntityNode]:
        """List entities whose allow-lists name the user or one of the teams"""
        pass

    @abstractmethod
    async def lock_workspace(self, workspace_id: UUID) -> bool:
        """
        Lock the workspace row for the rest of the transaction.

        Returns False if the workspace does not exist.
        """
        pass

    @abstractmethod
    async def update_access_control(
        self,
        entity_type: EntityType,
        entity_id: UUID,
        visibility: FieldUpdate,
        allowed_users: FieldUpdate,
        allowed_teams: FieldUpdate,
    ) -> Optional[EntityNode]:
        """Apply tri-state updates to the access-control columns"""
        pass
