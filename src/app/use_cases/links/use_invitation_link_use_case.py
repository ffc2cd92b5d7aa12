"""
Use Invitation Link Use Case

Redeems a shareable link for one email address.
"""

import logging
from datetime import timedelta
from typing import Optional

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import normalize_email
from src.domain.base import generate_token, utc_now
from src.domain.entities import (
    AccessRequest,
    AccessRequestStatus,
    Invitation,
    InvitationAction,
    InvitationActivity,
    InvitationMethod,
    InvitationStatus,
)
from src.domain.errors import ErrorCode

from .dtos import LinkRedemptionResponse

logger = logging.getLogger(__name__)


class UseInvitationLinkUseCase:
    """
    Use case for redeeming an invitation link.

    Business Rules:
    - Unknown or inactive link is INVALID_TOKEN, expired link is EXPIRED,
      exhausted link is CONFLICT
    - The email domain must pass the link's block / allow lists (FORBIDDEN)
    - Existing members and addresses with a pending invitation or request
      are refused (CONFLICT)
    - One use is taken with a single conditional UPDATE; if it changes no
      row the link ran out concurrently (CONFLICT)
    - Success mints a pending invitation, or a pending access request when
      the link requires approval
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, link_token: str, email: str, message: Optional[str] = None
    ) -> Result[LinkRedemptionResponse]:
        async with self.uow:
            email_result = normalize_email(email)
            if email_result.is_err():
                return email_result
            normalized_email = email_result.value

            settings = await self.uow.invitation_links.get_by_token(link_token)
            if settings is None or not settings.is_active:
                return Return.err(
                    Error(ErrorCode.INVALID_TOKEN, "Invalid or inactive invitation link")
                )

            now = utc_now()
            if settings.is_expired(now):
                return Return.err(Error(ErrorCode.EXPIRED, "This invitation link has expired"))
            if settings.is_exhausted():
                return Return.err(
                    Error(ErrorCode.CONFLICT, "This invitation link has reached its usage limit")
                )

            if not settings.check_domain(normalized_email):
                return Return.err(
                    Error(ErrorCode.FORBIDDEN, "Email domain is not allowed for this link")
                )

            user = await self.uow.users.get_by_email(normalized_email)
            if user is not None:
                existing = await self.uow.memberships.get(
                    settings.target_type, settings.target_id, user.id
                )
                if existing is not None:
                    return Return.err(
                        Error(
                            ErrorCode.CONFLICT,
                            f"User is already a member of this {settings.target_type.value}",
                        )
                    )

            pending_invitation = await self.uow.invitations.get_pending_by_target_and_email(
                settings.target_type, settings.target_id, normalized_email
            )
            if pending_invitation is not None:
                return Return.err(
                    Error(ErrorCode.CONFLICT, "A pending invitation already exists for this email")
                )

            if settings.requires_approval:
                pending_request = await self.uow.access_requests.get_pending(
                    settings.target_type, settings.target_id, normalized_email
                )
                if pending_request is not None:
                    return Return.err(
                        Error(ErrorCode.CONFLICT, "A pending access request already exists")
                    )

            if not await self.uow.invitation_links.try_consume(settings.id, now):
                logger.warning(f"Invitation link {settings.id} ran out for {normalized_email}")
                return Return.err(
                    Error(ErrorCode.CONFLICT, "This invitation link has reached its usage limit")
                )

            if settings.requires_approval:
                access_request = await self.uow.access_requests.create(
                    AccessRequest(
                        workspace_id=settings.workspace_id,
                        requester_id=user.id if user else None,
                        email=normalized_email,
                        target_type=settings.target_type,
                        target_id=settings.target_id,
                        message=message,
                        requested_role=settings.default_role,
                        status=AccessRequestStatus.pending,
                        created_at=now,
                        updated_at=now,
                    )
                )
                await self.uow.commit()
                logger.info(
                    f"Link {settings.id} redeemed by {normalized_email}, awaiting approval"
                )
                return Return.ok(
                    LinkRedemptionResponse(
                        kind="access_request",
                        status=AccessRequestStatus.pending.value,
                        target_type=settings.target_type.value,
                        target_id=str(settings.target_id),
                        role=settings.default_role.value,
                        access_request_id=str(access_request.id),
                    )
                )

            consumed = await self.uow.invitation_links.get_by_id(settings.id)
            invitation = await self.uow.invitations.create(
                Invitation(
                    workspace_id=settings.workspace_id,
                    email=normalized_email,
                    target_type=settings.target_type,
                    target_id=settings.target_id,
                    role=settings.default_role,
                    permission=settings.default_permission,
                    token=generate_token(),
                    link_token=settings.link_token,
                    invited_by_id=settings.created_by_id,
                    invitee_user_id=user.id if user else None,
                    status=InvitationStatus.pending,
                    method=InvitationMethod.link,
                    message=message,
                    max_uses=settings.max_uses,
                    use_count=consumed.use_count if consumed else None,
                    expires_at=now + timedelta(days=ApplicationConfig.INVITATION_EXPIRY_DAYS),
                    created_at=now,
                    updated_at=now,
                )
            )
            await self.uow.invitation_activities.create(
                InvitationActivity(
                    invitation_id=invitation.id,
                    actor_id=user.id if user else None,
                    action=InvitationAction.link_redeemed,
                    details={"link_id": str(settings.id)},
                )
            )

            await self.uow.commit()
            logger.info(f"Link {settings.id} redeemed by {normalized_email}")

            return Return.ok(
                LinkRedemptionResponse(
                    kind="invitation",
                    status=InvitationStatus.pending.value,
                    target_type=settings.target_type.value,
                    target_id=str(settings.target_id),
                    role=settings.default_role.value,
                    invitation_id=str(invitation.id),
                    token=invitation.token,
                )
            )
