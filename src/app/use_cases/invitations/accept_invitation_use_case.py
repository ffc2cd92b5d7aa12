"""
Accept Invitation Use Cases

Redeem an invitation by token or by ID. The status flip and the membership
insert commit together or not at all.
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import grant_membership, load_target
from src.domain.base import utc_now
from src.domain.entities import (
    Invitation,
    InvitationAction,
    InvitationActivity,
    InvitationStatus,
)
from src.domain.errors import ErrorCode

from .dtos import AcceptInvitationResponse

logger = logging.getLogger(__name__)


class AcceptInvitationUseCase:
    """
    Use case for accepting an invitation by its token.

    Business Rules:
    - Unknown token is INVALID_TOKEN
    - Only pending invitations can be accepted (CONFLICT otherwise)
    - Expired invitations are moved to expired and rejected (EXPIRED)
    - The accepting user's email must match the invitation (FORBIDDEN)
    - pending -> accepted is a conditional update; losing the race is CONFLICT
    - Membership is created in the same transaction as the status flip
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def _find(self, key) -> Result[Invitation]:
        invitation = await self.uow.invitations.get_by_token(key)
        if invitation is None:
            return Return.err(
                Error(ErrorCode.INVALID_TOKEN, "Invalid or non-existent invitation token")
            )
        return Return.ok(invitation)

    async def execute(self, token: str, user_id: UUID) -> Result[AcceptInvitationResponse]:
        async with self.uow:
            found = await self._find(token)
            if found.is_err():
                return found
            return await self._accept(found.value, user_id)

    async def _accept(
        self, invitation: Invitation, user_id: UUID
    ) -> Result[AcceptInvitationResponse]:
        if invitation.status != InvitationStatus.pending:
            return Return.err(
                Error(
                    ErrorCode.CONFLICT,
                    f"This invitation has already been {invitation.status.value}",
                )
            )

        now = utc_now()
        if invitation.is_expired(now):
            if await self.uow.invitations.transition_status(
                invitation.id, InvitationStatus.expired, now
            ):
                await self.uow.invitation_activities.create(
                    InvitationActivity(
                        invitation_id=invitation.id,
                        action=InvitationAction.expired,
                    )
                )
                await self.uow.commit()
            return Return.err(Error(ErrorCode.EXPIRED, "This invitation has expired"))

        user = await self.uow.users.get_by_id(user_id)
        if user is None:
            return Return.err(Error(ErrorCode.NOT_FOUND, "User not found"))

        if user.email.strip().lower() != invitation.email:
            logger.warning(f"User {user_id} tried to accept invitation {invitation.id} for another email")
            return Return.err(
                Error(ErrorCode.FORBIDDEN, "This invitation was sent to a different email")
            )

        node_result = await load_target(self.uow, invitation.target_type, invitation.target_id)
        if node_result.is_err():
            return node_result
        node = node_result.value

        existing = await self.uow.memberships.get(node.type, node.id, user_id)
        if existing is not None:
            return Return.err(
                Error(ErrorCode.CONFLICT, f"User is already a member of this {node.type.value}")
            )

        if not await self.uow.invitations.transition_status(
            invitation.id, InvitationStatus.accepted, now, invitee_user_id=user_id
        ):
            logger.warning(f"Invitation {invitation.id} left pending concurrently")
            return Return.err(
                Error(ErrorCode.CONFLICT, "This invitation is no longer pending")
            )

        grant_result = await grant_membership(
            self.uow, node, user_id, invitation.role, added_by_id=invitation.invited_by_id
        )
        if grant_result.is_err():
            # leaving the unit of work rolls the status flip back
            return grant_result
        membership = grant_result.value

        await self.uow.invitation_activities.create(
            InvitationActivity(
                invitation_id=invitation.id,
                actor_id=user_id,
                action=InvitationAction.accepted,
                details={"membership_id": str(membership.id)},
            )
        )

        await self.uow.commit()
        logger.info(f"User {user_id} accepted invitation {invitation.id} to {node.ref}")

        return Return.ok(
            AcceptInvitationResponse(
                invite_id=str(invitation.id),
                status=InvitationStatus.accepted.value,
                membership_id=str(membership.id),
                target_type=node.type.value,
                target_id=str(node.id),
                role=invitation.role.value,
            )
        )


class AcceptInvitationByIdUseCase(AcceptInvitationUseCase):
    """Same rules as accepting by token; unknown IDs are NOT_FOUND."""

    async def _find(self, key) -> Result[Invitation]:
        invitation = await self.uow.invitations.get_by_id(key)
        if invitation is None:
            return Return.err(Error(ErrorCode.NOT_FOUND, "Invitation not found"))
        return Return.ok(invitation)

    async def execute(
        self, invitation_id: UUID, user_id: UUID
    ) -> Result[AcceptInvitationResponse]:
        return await super().execute(invitation_id, user_id)
