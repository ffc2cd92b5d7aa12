"""
Create Invitation Use Cases

Token invitations to any entity, plus the workspace and project shortcuts.
"""

import logging
from datetime import timedelta
from typing import Dict, Optional
from uuid import UUID

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.notification_service import INotificationService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import (
    invite_url,
    load_target,
    normalize_email,
    parse_entity_type,
    parse_enum,
    resolver_for,
    workspace_of,
)
from src.domain.base import generate_token, utc_now
from src.domain.entities import (
    CAPABILITIES,
    EntityType,
    Invitation,
    InvitationAction,
    InvitationActivity,
    InvitationMethod,
    InvitationPermissions,
    InvitationStatus,
    MemberRole,
    PermissionLevel,
)
from src.domain.errors import ErrorCode
from src.domain.roles import (
    default_permission_for_role,
    outranks_or_equals,
    valid_invitation_roles,
)

from .dtos import InvitationResponse

logger = logging.getLogger(__name__)

# method=link rows are minted by UseInvitationLinkUseCase only
DIRECT_METHODS = frozenset({InvitationMethod.email, InvitationMethod.direct})


class CreateInvitationUseCase:
    """
    Use case for inviting an email address onto an entity.

    Business Rules:
    - Role must be valid for the target type; owner is never offered
    - Permission defaults from the role; capabilities may override it
    - Inviter must manage the target and rank >= the offered role
    - Cannot invite existing direct members (CONFLICT)
    - Cannot duplicate a pending invitation for the same address (CONFLICT)
    - Method is email or direct; link invitations come from link redemption
    - Expires after INVITATION_EXPIRY_DAYS unless expires_in_days=0
    - Notification is sent after commit and never undoes the invitation
    """

    def __init__(self, uow: UnitOfWork, notifier: INotificationService):
        self.uow = uow
        self.notifier = notifier

    async def execute(
        self,
        inviter_id: UUID,
        target_type: str,
        target_id: UUID,
        email: str,
        role: str,
        permission: Optional[str] = None,
        message: Optional[str] = None,
        expires_in_days: Optional[int] = None,
        capabilities: Optional[Dict[str, bool]] = None,
        method: str = InvitationMethod.email.value,
    ) -> Result[InvitationResponse]:
        async with self.uow:
            type_result = parse_entity_type(target_type)
            if type_result.is_err():
                return type_result
            entity_type = type_result.value

            role_result = parse_enum(MemberRole, role, "role")
            if role_result.is_err():
                return role_result
            member_role = role_result.value

            if member_role not in valid_invitation_roles(entity_type):
                return Return.err(
                    Error(
                        ErrorCode.INVALID_INPUT,
                        f"Role {member_role.value} cannot be offered on a {entity_type.value}",
                    )
                )

            if permission is None:
                permission_level = default_permission_for_role(member_role)
            else:
                permission_result = parse_enum(PermissionLevel, permission, "permission")
                if permission_result.is_err():
                    return permission_result
                permission_level = permission_result.value

            method_result = parse_enum(InvitationMethod, method, "method")
            if method_result.is_err():
                return method_result
            if method_result.value not in DIRECT_METHODS:
                return Return.err(
                    Error(
                        ErrorCode.INVALID_INPUT,
                        "Link invitations are only issued through an invitation link",
                    )
                )

            if capabilities:
                unknown = set(capabilities) - set(CAPABILITIES)
                if unknown:
                    return Return.err(
                        Error(
                            ErrorCode.INVALID_INPUT,
                            f"Unknown capabilities: {', '.join(sorted(unknown))}",
                        )
                    )

            if expires_in_days is None:
                expires_in_days = ApplicationConfig.INVITATION_EXPIRY_DAYS
            if expires_in_days < 0:
                return Return.err(
                    Error(ErrorCode.INVALID_INPUT, "expires_in_days must not be negative")
                )

            email_result = normalize_email(email)
            if email_result.is_err():
                return email_result
            normalized_email = email_result.value

            node_result = await load_target(self.uow, entity_type, target_id)
            if node_result.is_err():
                return node_result
            node = node_result.value

            manager_result = await resolver_for(self.uow).require_manager(node, inviter_id)
            if manager_result.is_err():
                return manager_result

            if not outranks_or_equals(manager_result.value.role, member_role):
                return Return.err(
                    Error(
                        ErrorCode.FORBIDDEN,
                        f"Cannot invite as {member_role.value}, above your own role",
                    )
                )

            workspace_result = await workspace_of(self.uow, node)
            if workspace_result.is_err():
                return workspace_result

            existing_user = await self.uow.users.get_by_email(normalized_email)
            if existing_user is not None:
                existing_membership = await self.uow.memberships.get(
                    entity_type, target_id, existing_user.id
                )
                if existing_membership is not None:
                    return Return.err(
                        Error(
                            ErrorCode.CONFLICT,
                            f"User is already a member of this {entity_type.value}",
                        )
                    )

            pending = await self.uow.invitations.get_pending_by_target_and_email(
                entity_type, target_id, normalized_email
            )
            if pending is not None:
                return Return.err(
                    Error(
                        ErrorCode.CONFLICT,
                        "A pending invitation already exists for this email",
                    )
                )

            now = utc_now()
            invitation = Invitation(
                workspace_id=workspace_result.value,
                email=normalized_email,
                target_type=entity_type,
                target_id=target_id,
                role=member_role,
                permission=permission_level,
                token=generate_token(),
                invited_by_id=inviter_id,
                invitee_user_id=existing_user.id if existing_user else None,
                status=InvitationStatus.pending,
                method=method_result.value,
                message=message,
                expires_at=now + timedelta(days=expires_in_days) if expires_in_days else None,
                created_at=now,
                updated_at=now,
            )
            invitation = await self.uow.invitations.create(invitation)

            if capabilities:
                granted = InvitationPermissions.for_level(invitation.id, permission_level)
                for name, allowed in capabilities.items():
                    setattr(granted, name, bool(allowed))
                await self.uow.invitations.create_permissions(granted)

            await self.uow.invitation_activities.create(
                InvitationActivity(
                    invitation_id=invitation.id,
                    actor_id=inviter_id,
                    action=InvitationAction.created,
                    details={"role": member_role.value, "email": normalized_email},
                )
            )

            await self.uow.commit()
            logger.info(
                f"User {inviter_id} invited {normalized_email} to {node.ref} as {member_role.value}"
            )

            url = invite_url(invitation.token)
            try:
                await self.notifier.send_invitation(
                    recipient=normalized_email,
                    invite_url=url,
                    role=member_role.value,
                    target_type=entity_type.value,
                    target_name=node.name,
                    inviter_id=inviter_id,
                )
            except Exception:
                logger.exception(f"Failed to notify {normalized_email} of invitation {invitation.id}")

            return Return.ok(
                InvitationResponse(
                    invite_id=str(invitation.id),
                    status=InvitationStatus.pending.value,
                    target_type=entity_type.value,
                    target_id=str(target_id),
                    email=normalized_email,
                    role=member_role.value,
                    permission=permission_level.value,
                    token=invitation.token,
                    invite_url=url,
                    expires_at=invitation.expires_at.isoformat() if invitation.expires_at else None,
                )
            )


class CreateWorkspaceInvitationUseCase(CreateInvitationUseCase):
    async def execute(
        self, inviter_id: UUID, workspace_id: UUID, email: str, role: str, **options
    ) -> Result[InvitationResponse]:
        return await super().execute(
            inviter_id, EntityType.workspace.value, workspace_id, email, role, **options
        )


class CreateProjectInvitationUseCase(CreateInvitationUseCase):
    async def execute(
        self, inviter_id: UUID, project_id: UUID, email: str, role: str, **options
    ) -> Result[InvitationResponse]:
        return await super().execute(
            inviter_id, EntityType.project.value, project_id, email, role, **options
        )
