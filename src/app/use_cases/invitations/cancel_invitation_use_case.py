"""
Cancel / Revoke Invitation Use Cases

Both end a pending invitation for good. Cancel is the inviter withdrawing an
offer, revoke is an administrative withdrawal; the rules are the same.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import authorize_invitation_actor
from src.domain.base import utc_now
from src.domain.entities import InvitationAction, InvitationActivity, InvitationStatus
from src.domain.errors import ErrorCode

from .dtos import InvitationStatusResponse

logger = logging.getLogger(__name__)


class CancelInvitationUseCase:
    """
    Business Rules:
    - Inviter or a manager of the target only (FORBIDDEN otherwise)
    - pending -> terminal status is a conditional update (CONFLICT otherwise)
    """

    final_status = InvitationStatus.cancelled
    action = InvitationAction.cancelled

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, requester_id: UUID, invitation_id: UUID
    ) -> Result[InvitationStatusResponse]:
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

            auth_result = await authorize_invitation_actor(self.uow, invitation, requester_id)
            if auth_result.is_err():
                return auth_result

            if not await self.uow.invitations.transition_status(
                invitation_id, self.final_status, utc_now()
            ):
                return Return.err(
                    Error(ErrorCode.CONFLICT, "This invitation is no longer pending")
                )

            await self.uow.invitation_activities.create(
                InvitationActivity(
                    invitation_id=invitation_id,
                    actor_id=requester_id,
                    action=self.action,
                )
            )
            await self.uow.commit()

            logger.info(
                f"User {requester_id} set invitation {invitation_id} to {self.final_status.value}"
            )
            return Return.ok(
                InvitationStatusResponse(
                    invite_id=str(invitation_id), status=self.final_status.value
                )
            )


class RevokeInvitationUseCase(CancelInvitationUseCase):
    final_status = InvitationStatus.revoked
    action = InvitationAction.revoked
