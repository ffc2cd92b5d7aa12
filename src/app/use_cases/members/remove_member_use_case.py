"""
Remove Member Use Case

Deletes a direct membership. Members may always leave on their own.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import load_target, parse_entity_type, resolver_for
from src.domain.entities import EntityType, MemberRole
from src.domain.errors import ErrorCode
from src.domain.roles import outranks_or_equals

from .dtos import RemoveMemberResponse

logger = logging.getLogger(__name__)


class RemoveMemberUseCase:
    """
    Use case for removing a direct member from an entity.

    Business Rules:
    - Requester must manage the entity and rank >= the target's role,
      unless requester and target are the same user (leaving)
    - A workspace must keep at least one owner; owners are counted under
      the workspace lock
    - Only the direct row is removed; access inherited from ancestors stays
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, requester_id: UUID, entity_type: str, entity_id: UUID, user_id: UUID
    ) -> Result[RemoveMemberResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result
            target_type = type_result.value

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

            if requester_id != user_id:
                manager_result = await resolver_for(self.uow).require_manager(node, requester_id)
                if manager_result.is_err():
                    return manager_result

                if not outranks_or_equals(manager_result.value.role, target.role):
                    return Return.err(
                        Error(
                            ErrorCode.FORBIDDEN,
                            f"Cannot remove a member with role {target.role.value}",
                        )
                    )

            if target_type == EntityType.workspace and target.role == MemberRole.owner:
                owners = await self.uow.memberships.count_by_role(
                    target_type, entity_id, MemberRole.owner
                )
                if owners <= 1:
                    logger.warning(f"Refused to remove last owner {user_id} of {node.ref}")
                    return Return.err(
                        Error(
                            ErrorCode.LAST_OWNER,
                            "Cannot remove the last owner. Transfer ownership first.",
                        )
                    )

            await self.uow.memberships.delete(target)
            await self.uow.commit()

            logger.info(f"User {requester_id} removed {user_id} from {node.ref}")
            return Return.ok(RemoveMemberResponse(status="removed"))
