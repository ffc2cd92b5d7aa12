"""
Create Link Settings Use Case

Issues a shareable invitation link for an entity, superseding the previous one.
"""

import logging
from datetime import UTC, datetime
from typing import Iterable, List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import (
    load_target,
    parse_entity_type,
    parse_enum,
    resolver_for,
    workspace_of,
)
from src.domain.base import generate_token, utc_now
from src.domain.entities import InvitationLinkSettings, MemberRole, PermissionLevel
from src.domain.errors import ErrorCode
from src.domain.roles import (
    default_permission_for_role,
    outranks_or_equals,
    valid_invitation_roles,
)

from .dtos import LinkSettingsResponse
from .mappers import link_settings_response

logger = logging.getLogger(__name__)


def _normalize_domains(domains: Optional[Iterable[str]]) -> Result[List[str]]:
    normalized = []
    for domain in domains or []:
        value = (domain or "").strip().lower().lstrip("@")
        if not value or "@" in value or " " in value:
            return Return.err(Error(ErrorCode.INVALID_INPUT, f"Invalid domain: {domain}"))
        if value not in normalized:
            normalized.append(value)
    return Return.ok(normalized)


class CreateLinkSettingsUseCase:
    """
    Use case for creating the invitation link of an entity.

    Business Rules:
    - Role must be valid for the target type and not above the creator's
    - max_uses, when set, is at least 1
    - expires_at, when set, lies in the future
    - Creating a link deactivates the previous active link of the target,
      under the workspace lock, so at most one link stays valid
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        requester_id: UUID,
        target_type: str,
        target_id: UUID,
        role: str,
        permission: Optional[str] = None,
        requires_approval: bool = False,
        allowed_domains: Optional[List[str]] = None,
        blocked_domains: Optional[List[str]] = None,
        max_uses: Optional[int] = None,
        expires_at: Optional[datetime] = None,
    ) -> Result[LinkSettingsResponse]:
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

            if max_uses is not None and max_uses < 1:
                return Return.err(Error(ErrorCode.INVALID_INPUT, "max_uses must be at least 1"))

            now = utc_now()
            if expires_at is not None:
                if expires_at.tzinfo is not None:
                    expires_at = expires_at.astimezone(UTC).replace(tzinfo=None)
                if expires_at <= now:
                    return Return.err(
                        Error(ErrorCode.INVALID_INPUT, "expires_at must be in the future")
                    )

            allowed_result = _normalize_domains(allowed_domains)
            if allowed_result.is_err():
                return allowed_result
            blocked_result = _normalize_domains(blocked_domains)
            if blocked_result.is_err():
                return blocked_result

            node_result = await load_target(self.uow, entity_type, target_id)
            if node_result.is_err():
                return node_result
            node = node_result.value

            manager_result = await resolver_for(self.uow).require_manager(node, requester_id)
            if manager_result.is_err():
                return manager_result
            if not outranks_or_equals(manager_result.value.role, member_role):
                return Return.err(
                    Error(
                        ErrorCode.FORBIDDEN,
                        f"Cannot offer {member_role.value}, above your own role",
                    )
                )

            workspace_result = await workspace_of(self.uow, node)
            if workspace_result.is_err():
                return workspace_result
            workspace_id = workspace_result.value

            await self.uow.entities.lock_workspace(workspace_id)
            superseded = await self.uow.invitation_links.deactivate_for_target(
                workspace_id, entity_type, target_id, now
            )

            settings = await self.uow.invitation_links.create(
                InvitationLinkSettings(
                    workspace_id=workspace_id,
                    link_token=generate_token(),
                    target_type=entity_type,
                    target_id=target_id,
                    default_role=member_role,
                    default_permission=permission_level,
                    is_active=True,
                    requires_approval=requires_approval,
                    allowed_domains=allowed_result.value,
                    blocked_domains=blocked_result.value,
                    max_uses=max_uses,
                    use_count=0,
                    expires_at=expires_at,
                    created_by_id=requester_id,
                    created_at=now,
                    updated_at=now,
                )
            )

            await self.uow.commit()
            logger.info(
                f"User {requester_id} created invitation link for {node.ref} "
                f"(superseded {superseded})"
            )
            return Return.ok(link_settings_response(settings))
