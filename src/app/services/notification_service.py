from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID


class INotificationService(ABC):
    """Outbound invitation notices - fire-and-forget from the engine's side"""

    @abstractmethod
    async def send_invitation(
        self,
        recipient: str,
        invite_url: str,
        role: str,
        target_type: str,
        target_name: str,
        inviter_id: Optional[UUID] = None,
        reminder: bool = False,
    ) -> None:
        pass
