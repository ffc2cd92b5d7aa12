"""
List Members Use Case
"""

from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import parse_entity_type, resolver_for

from .dtos import EntityRefResponse, MemberListResponse
from .mappers import member_info


class ListMembersUseCase:
    """
    Members of an entity as seen by someone with access to it.

    Business Rules:
    - Requester needs effective access to the entity (UNAUTHORIZED otherwise)
    - include_inherited=False lists direct memberships only
    - Inherited members report the ancestor they come from
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        requester_id: UUID,
        entity_type: str,
        entity_id: UUID,
        include_inherited: bool = True,
    ) -> Result[MemberListResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result
            target_type = type_result.value

            resolver = resolver_for(self.uow)
            access_result = await resolver.get_access_level(target_type, entity_id, requester_id)
            if access_result.is_err():
                return access_result

            if include_inherited:
                members_result = await resolver.list_effective_members(target_type, entity_id)
            else:
                members_result = await resolver.list_direct_members(target_type, entity_id)
            if members_result.is_err():
                return members_result

            return Return.ok(
                MemberListResponse(
                    entity=EntityRefResponse(type=target_type.value, id=str(entity_id)),
                    members=[member_info(m) for m in members_result.value],
                )
            )
