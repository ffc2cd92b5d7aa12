"""
Update Member Role Use Case
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import (
    load_target,
    parse_entity_type,
    parse_enum,
    resolver_for,
)
from src.domain.entities import EntityType, MemberRole
from src.domain.errors import ErrorCode
from src.domain.roles import outranks_or_equals, valid_member_roles

from .dtos import MemberResponse

logger = logging.getLogger(__name__)


class UpdateMemberRoleUseCase:
    """
    Use case for changing the role of a direct member.

    Business Rules:
    - New role must belong to the entity type's role set
    - Requester must manage the entity and rank >= both the current and
      the requested role
    - Demoting the last owner of a workspace fails with LAST_OWNER
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        requester_id: UUID,
        entity_type: str,
        entity_id: UUID,
        user_id: UUID,
        role: str,
    ) -> Result[MemberResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result
            target_type = type_result.value

            role_result = parse_enum(MemberRole, role, "role")
            if role_result.is_err():
                return role_result
            new_role = role_result.value

            if new_role not in valid_member_roles(target_type):
                return Return.err(
                    Error(
                        ErrorCode.INVALID_INPUT,
                        f"Role {new_role.value} is not valid for a {target_type.value}",
                    )
                )

            node_result = await load_target(self.uow, target_type, entity_id)
            if node_result.is_err():
                return node_result
            node = node_result.value

            if target_type == EntityType.workspace:
                await self.uow.entities.lock_workspace(node.id)

            target = await self.uow.memberships.get(target_type, entity_id, user_id)
            if target is None:
                return Return.err(
                    Error(ErrorCode.NOT_FOUND, f"User is not a direct member of this {target_type.value}")
                )

            manager_result = await resolver_for(self.uow).require_manager(node, requester_id)
            if manager_result.is_err():
                return manager_result
            requester_role = manager_result.value.role

            if not (
                outranks_or_equals(requester_role, target.role)
                and outranks_or_equals(requester_role, new_role)
            ):
                return Return.err(
                    Error(
                        ErrorCode.FORBIDDEN,
                        f"Role {requester_role.value} cannot change "
                        f"{target.role.value} to {new_role.value}",
                    )
                )

            if (
                target_type == EntityType.workspace
                and target.role == MemberRole.owner
                and new_role != MemberRole.owner
            ):
                owners = await self.uow.memberships.count_by_role(
                    target_type, entity_id, MemberRole.owner
                )
                if owners <= 1:
                    logger.warning(f"Refused to demote last owner {user_id} of {node.ref}")
                    return Return.err(
                        Error(
                            ErrorCode.LAST_OWNER,
                            "Cannot demote the last owner. Promote another owner first.",
                        )
                    )

            if target.role != new_role:
                old_role = target.role
                target = await self.uow.memberships.update_role(target, new_role)
                await self.uow.commit()
                logger.info(
                    f"User {requester_id} changed {user_id} on {node.ref} "
                    f"from {old_role.value} to {new_role.value}"
                )

            return Return.ok(
                MemberResponse(
                    membership_id=str(target.id),
                    entity_type=target_type.value,
                    entity_id=str(entity_id),
                    user_id=str(user_id),
                    role=new_role.value,
                )
            )
