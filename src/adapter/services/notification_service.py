import logging
from typing import Optional
from uuid import UUID

from src.app.services.notification_service import INotificationService

logger = logging.getLogger(__name__)


class LoggingNotificationService(INotificationService):
    """Writes invitation notices to the log instead of delivering them"""

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
        kind = "Reminder" if reminder else "Invitation"
        logger.info(
            f"{kind} for {recipient}: join {target_type} '{target_name}' as {role} "
            f"via {invite_url} (invited by {inviter_id})"
        )
