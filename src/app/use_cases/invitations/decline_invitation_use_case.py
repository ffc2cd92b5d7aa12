"""
Decline Invitation Use Case
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import InvitationAction, InvitationActivity, InvitationStatus
from src.domain.errors import ErrorCode

from .dtos import InvitationStatusResponse

logger = logging.getLogger(__name__)


class DeclineInvitationUseCase:
    """
    Use case for the invitee turning an invitation down.

    Business Rules:
    - Only the addressed user may decline (FORBIDDEN otherwise)
    - pending -> declined is a conditional update; a second call is CONFLICT
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, invitation_id: UUID, user_id: UUID) -> Result[InvitationStatusResponse]:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "Invitation not found"))

            if invitation.status != InvitationStatus.pending:
                return Return.err(
                    Error(
                        ErrorCode.CONFLICT,
                        f"This invitation has already been {invitation.status.value}",
                    )
                )

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "User not found"))
            if user.email.strip().lower() != invitation.email:
                return Return.err(
                    Error(ErrorCode.FORBIDDEN, "This invitation was sent to a different email")
                )

            now = utc_now()
            if not await self.uow.invitations.transition_status(
                invitation_id, InvitationStatus.declined, now, invitee_user_id=user_id
            ):
                return Return.err(
                    Error(ErrorCode.CONFLICT, "This invitation is no longer pending")
                )

            await self.uow.invitation_activities.create(
                InvitationActivity(
                    invitation_id=invitation_id,
                    actor_id=user_id,
                    action=InvitationAction.declined,
                )
            )
            await self.uow.commit()

            logger.info(f"User {user_id} declined invitation {invitation_id}")
            return Return.ok(
                InvitationStatusResponse(
                    invite_id=str(invitation_id), status=InvitationStatus.declined.value
                )
            )
