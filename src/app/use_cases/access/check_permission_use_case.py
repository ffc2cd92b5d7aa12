from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import parse_entity_type, parse_enum, resolver_for
from src.domain.entities import PermissionAction

from .dtos import EntityRefResponse, PermissionCheckResponse


class CheckPermissionUseCase:
    """
    Can the user view, edit, manage or delete the entity.

    No access answers allowed=False; an unknown entity is NOT_FOUND.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, entity_type: str, entity_id: UUID, user_id: UUID, action: str
    ) -> Result[PermissionCheckResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result

            action_result = parse_enum(PermissionAction, action, "action")
            if action_result.is_err():
                return action_result

            allowed_result = await resolver_for(self.uow).check_permission(
                type_result.value, entity_id, user_id, action_result.value
            )
            if allowed_result.is_err():
                return allowed_result

            return Return.ok(
                PermissionCheckResponse(
                    entity=EntityRefResponse(type=type_result.value.value, id=str(entity_id)),
                    action=action_result.value.value,
                    allowed=allowed_result.value,
                )
            )
