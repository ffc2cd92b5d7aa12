"""
Resend Invitation / Regenerate Token Use Cases

Both replace the token, which invalidates every earlier link. Resending also
counts a reminder, restarts the expiry window and notifies the invitee.
"""

import logging
from datetime import timedelta
from uuid import UUID

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.notification_service import INotificationService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import authorize_invitation_actor, invite_url, load_target
from src.domain.base import generate_token, utc_now
from src.domain.entities import InvitationAction, InvitationActivity, InvitationStatus
from src.domain.errors import ErrorCode

from .dtos import ResendInvitationResponse

logger = logging.getLogger(__name__)


class ResendInvitationUseCase:
    """
    Use case for resending a pending invitation.

    Business Rules:
    - Inviter or a manager of the target only (FORBIDDEN otherwise)
    - Only pending invitations can be resent (CONFLICT otherwise)
    - New token, reminder_count + 1, reminder_sent_at stamped
    - expires_at restarts when the invitation has one; created_at is kept
    """

    def __init__(self, uow: UnitOfWork, notifier: INotificationService):
        self.uow = uow
        self.notifier = notifier

    async def execute(
        self, requester_id: UUID, invitation_id: UUID
    ) -> Result[ResendInvitationResponse]:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "Invitation not found"))

            if invitation.status != InvitationStatus.pending:
                return Return.err(
                    Error(
                        ErrorCode.CONFLICT,
                        f"Cannot resend an invitation that is {invitation.status.value}",
                    )
                )

            auth_result = await authorize_invitation_actor(self.uow, invitation, requester_id)
            if auth_result.is_err():
                return auth_result

            now = utc_now()
            token = generate_token()
            expires_at = None
            if invitation.expires_at is not None:
                expires_at = now + timedelta(days=ApplicationConfig.INVITATION_EXPIRY_DAYS)

            if not await self.uow.invitations.rotate_token(
                invitation_id, token, now, expires_at=expires_at, reminder=True
            ):
                return Return.err(
                    Error(ErrorCode.CONFLICT, "This invitation is no longer pending")
                )

            reminder_count = invitation.reminder_count + 1
            await self.uow.invitation_activities.create(
                InvitationActivity(
                    invitation_id=invitation_id,
                    actor_id=requester_id,
                    action=InvitationAction.resent,
                    details={"reminder_count": reminder_count},
                )
            )

            node_result = await load_target(self.uow, invitation.target_type, invitation.target_id)
            target_name = node_result.value.name if node_result.is_ok() else ""

            await self.uow.commit()
            logger.info(f"User {requester_id} resent invitation {invitation_id}")

            url = invite_url(token)
            try:
                await self.notifier.send_invitation(
                    recipient=invitation.email,
                    invite_url=url,
                    role=invitation.role.value,
                    target_type=invitation.target_type.value,
                    target_name=target_name,
                    inviter_id=invitation.invited_by_id,
                    reminder=True,
                )
            except Exception:
                logger.exception(f"Failed to send reminder for invitation {invitation_id}")

            return Return.ok(
                ResendInvitationResponse(
                    invite_id=str(invitation_id),
                    status="resent",
                    token=token,
                    invite_url=url,
                    reminder_count=reminder_count,
                    expires_at=expires_at.isoformat() if expires_at else None,
                )
            )


class RegenerateTokenUseCase:
    """
    Use case for replacing the token of a pending invitation.

    Same authority and atomicity as resend; no reminder, expiry or
    notification side effects.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, requester_id: UUID, invitation_id: UUID
    ) -> Result[ResendInvitationResponse]:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "Invitation not found"))

            if invitation.status != InvitationStatus.pending:
                return Return.err(
                    Error(
                        ErrorCode.CONFLICT,
                        f"Cannot regenerate the token of an invitation that is {invitation.status.value}",
                    )
                )

            auth_result = await authorize_invitation_actor(self.uow, invitation, requester_id)
            if auth_result.is_err():
                return auth_result

            token = generate_token()
            if not await self.uow.invitations.rotate_token(invitation_id, token, utc_now()):
                return Return.err(
                    Error(ErrorCode.CONFLICT, "This invitation is no longer pending")
                )

            await self.uow.invitation_activities.create(
                InvitationActivity(
                    invitation_id=invitation_id,
                    actor_id=requester_id,
                    action=InvitationAction.token_regenerated,
                )
            )
            await self.uow.commit()

            return Return.ok(
                ResendInvitationResponse(
                    invite_id=str(invitation_id),
                    status="regenerated",
                    token=token,
                    invite_url=invite_url(token),
                    reminder_count=invitation.reminder_count,
                    expires_at=invitation.expires_at.isoformat() if invitation.expires_at else None,
                )
            )
