"""
Access Level Use Cases

Single (entity, user) decisions: the effective role, a yes/no check and the
full access summary.
"""

from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import parse_entity_type, resolver_for

from .dtos import AccessInfoResponse, AccessLevelResponse, EntityRefResponse, HasAccessResponse
from .mappers import level_response, ref_response


class GetAccessLevelUseCase:
    """
    Effective role of a user on an entity.

    Fails with UNAUTHORIZED when the user has no access and NOT_FOUND when
    the entity or one of its ancestors is missing.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, entity_type: str, entity_id: UUID, user_id: UUID
    ) -> Result[AccessLevelResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result

            level_result = await resolver_for(self.uow).get_access_level(
                type_result.value, entity_id, user_id
            )
            if level_result.is_err():
                return level_result
            return Return.ok(level_response(level_result.value))


class HasEffectiveAccessUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, entity_type: str, entity_id: UUID, user_id: UUID
    ) -> Result[HasAccessResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result

            access_result = await resolver_for(self.uow).has_effective_access(
                type_result.value, entity_id, user_id
            )
            if access_result.is_err():
                return access_result
            return Return.ok(HasAccessResponse(has_access=access_result.value))


class GetAccessInfoUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, entity_type: str, entity_id: UUID, user_id: UUID
    ) -> Result[AccessInfoResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result

            info_result = await resolver_for(self.uow).get_access_info(
                type_result.value, entity_id, user_id
            )
            if info_result.is_err():
                return info_result
            info = info_result.value

            return Return.ok(
                AccessInfoResponse(
                    entity=EntityRefResponse(type=info.entity.type.value, id=str(info.entity.id)),
                    user_id=str(info.user_id),
                    has_access=info.has_access,
                    role=info.role.value if info.role else None,
                    origin=ref_response(info.origin),
                    is_inherited=info.is_inherited,
                    via_allow_list=info.via_allow_list,
                    permission=info.permission.value if info.permission else None,
                    can_manage=info.can_manage,
                )
            )
