"""
Invitation Listing Use Cases
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import (
    authorize_invitation_actor,
    load_target,
    parse_entity_type,
    resolver_for,
)
from src.domain.entities import CAPABILITIES, InvitationPermissions
from src.domain.errors import ErrorCode

from .dtos import (
    InvitationActivityItem,
    InvitationDetailResponse,
    InvitationListResponse,
)
from .mappers import invitation_summary


class ListPendingInvitationsUseCase:
    """Pending invitations on an entity; managers only."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, requester_id: UUID, target_type: str, target_id: UUID
    ) -> Result[InvitationListResponse]:
        async with self.uow:
            type_result = parse_entity_type(target_type)
            if type_result.is_err():
                return type_result

            node_result = await load_target(self.uow, type_result.value, target_id)
            if node_result.is_err():
                return node_result

            manager_result = await resolver_for(self.uow).require_manager(
                node_result.value, requester_id
            )
            if manager_result.is_err():
                return manager_result

            invitations = await self.uow.invitations.list_pending_by_target(
                type_result.value, target_id
            )
            return Return.ok(
                InvitationListResponse(invitations=[invitation_summary(i) for i in invitations])
            )


class ListMyInvitationsUseCase:
    """Pending invitations addressed to the user's email."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[InvitationListResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "User not found"))

            invitations = await self.uow.invitations.list_pending_by_email(
                user.email.strip().lower()
            )
            return Return.ok(
                InvitationListResponse(invitations=[invitation_summary(i) for i in invitations])
            )


class GetInvitationUseCase:
    """
    One invitation with its capability set and activity log.

    Visible to the invitee, the inviter and managers of the target.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, requester_id: UUID, invitation_id: UUID
    ) -> Result[InvitationDetailResponse]:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "Invitation not found"))

            requester = await self.uow.users.get_by_id(requester_id)
            is_invitee = requester is not None and (
                requester.email.strip().lower() == invitation.email
            )
            if not is_invitee:
                auth_result = await authorize_invitation_actor(self.uow, invitation, requester_id)
                if auth_result.is_err():
                    return auth_result

            override = await self.uow.invitations.get_permissions(invitation_id)
            if override is None:
                override = InvitationPermissions.for_level(invitation.id, invitation.permission)

            activity = await self.uow.invitation_activities.list_by_invitation(invitation_id)

            return Return.ok(
                InvitationDetailResponse(
                    invitation=invitation_summary(invitation),
                    capabilities={name: getattr(override, name) for name in CAPABILITIES},
                    activity=[
                        InvitationActivityItem(
                            action=a.action.value,
                            actor_id=str(a.actor_id) if a.actor_id else None,
                            details=a.details,
                            created_at=a.created_at.isoformat(),
                        )
                        for a in activity
                    ],
                )
            )
