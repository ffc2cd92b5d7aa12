"""
Accessible Entities Use Case

Reverse queries: every workspace / space / folder / project a user can reach.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import parse_entity_type, resolver_for
from src.domain.entities import EntityType
from src.domain.errors import ErrorCode

from .dtos import AccessibleEntitiesResponse
from .mappers import accessible_info


class GetAccessibleEntitiesUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, entity_type: str) -> Result[AccessibleEntitiesResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result

            resolver = resolver_for(self.uow)
            queries = {
                EntityType.workspace: resolver.get_accessible_workspaces,
                EntityType.space: resolver.get_accessible_spaces,
                EntityType.folder: resolver.get_accessible_folders,
                EntityType.project: resolver.get_accessible_projects,
            }
            query = queries.get(type_result.value)
            if query is None:
                return Return.err(
                    Error(
                        ErrorCode.INVALID_ENTITY_TYPE,
                        f"Cannot list accessible {type_result.value} entities",
                    )
                )

            items_result = await query(user_id)
            if items_result.is_err():
                return items_result
            return Return.ok(
                AccessibleEntitiesResponse(items=[accessible_info(i) for i in items_result.value])
            )
