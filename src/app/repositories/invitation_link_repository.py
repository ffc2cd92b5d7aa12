from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import EntityType, InvitationLinkSettings


class IInvitationLinkRepository(ABC):
    """InvitationLinkSettings repository interface - application layer"""

    @abstractmethod
    async def create(self, settings: InvitationLinkSettings) -> InvitationLinkSettings:
        """Create new link settings"""
        pass

    @abstractmethod
    async def get_by_id(self, settings_id: UUID) -> Optional[InvitationLinkSettings]:
        """Get link settings by ID"""
        pass

    @abstractmethod
    async def get_by_token(self, link_token: str) -> Optional[InvitationLinkSettings]:
        """Get link settings by link token (always re-read from the database)"""
        pass

    @abstractmethod
    async def get_active_for_target(
        self, workspace_id: UUID, target_type: EntityType, target_id: UUID
    ) -> Optional[InvitationLinkSettings]:
        """Get the active link settings of a target, if any"""
        pass

    @abstractmethod
    async def deactivate_for_target(
        self, workspace_id: UUID, target_type: EntityType, target_id: UUID, now: datetime
    ) -> int:
        """Deactivate every active link of a target; returns the number of rows"""
        pass

    @abstractmethod
    async def deactivate(self, settings_id: UUID, now: datetime) -> bool:
        """Deactivate one link; False if it was already inactive"""
        pass

    @abstractmethod
    async def try_consume(self, settings_id: UUID, now: datetime) -> bool:
        """
        Atomically take one use of the link.

        Single conditional UPDATE incrementing use_count only while the link is
        active, unexpired and under max_uses. Returns False when no row changed.
        """
        pass
