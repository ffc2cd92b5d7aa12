"""
Add Member Use Case

Direct grant of a role on an entity by someone who manages it.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import (
    grant_membership,
    load_target,
    parse_entity_type,
    parse_enum,
    resolver_for,
)
from src.domain.access import EntityNode
from src.domain.entities import EntityType, MemberRole
from src.domain.errors import ErrorCode
from src.domain.roles import outranks_or_equals, valid_member_roles

from .dtos import MemberResponse

logger = logging.getLogger(__name__)


class AddMemberUseCase:
    """
    Use case for adding a direct member to any entity.

    Business Rules:
    - Role must belong to the entity type's role set
    - Requester must manage the entity and rank at least as high as the role
    - A workspace's creator may make itself the first owner of an empty workspace
    - A user holds at most one direct membership per entity
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def _is_bootstrap(
        self, node: EntityNode, requester_id: UUID, user_id: UUID, role: MemberRole
    ) -> bool:
        if node.type != EntityType.workspace or role != MemberRole.owner:
            return False
        if requester_id != user_id:
            return False
        if node.created_by_id is not None and node.created_by_id != requester_id:
            return False
        return not await self.uow.memberships.list_by_entity(node.type, node.id)

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
            member_role = role_result.value

            if member_role not in valid_member_roles(target_type):
                return Return.err(
                    Error(
                        ErrorCode.INVALID_INPUT,
                        f"Role {member_role.value} is not valid for a {target_type.value}",
                    )
                )

            node_result = await load_target(self.uow, target_type, entity_id)
            if node_result.is_err():
                return node_result
            node = node_result.value

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "User not found"))

            if target_type == EntityType.workspace:
                await self.uow.entities.lock_workspace(node.id)

            if not await self._is_bootstrap(node, requester_id, user_id, member_role):
                manager_result = await resolver_for(self.uow).require_manager(node, requester_id)
                if manager_result.is_err():
                    return manager_result

                if not outranks_or_equals(manager_result.value.role, member_role):
                    return Return.err(
                        Error(
                            ErrorCode.FORBIDDEN,
                            f"Cannot grant {member_role.value} above your own role",
                        )
                    )

            grant_result = await grant_membership(
                self.uow, node, user_id, member_role, added_by_id=requester_id
            )
            if grant_result.is_err():
                return grant_result
            membership = grant_result.value

            await self.uow.commit()

            return Return.ok(
                MemberResponse(
                    membership_id=str(membership.id),
                    entity_type=target_type.value,
                    entity_id=str(entity_id),
                    user_id=str(user_id),
                    role=member_role.value,
                )
            )
