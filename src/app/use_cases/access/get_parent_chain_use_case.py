from uuid import UUID

from libs.result import Result, Return
from src.app.services.hierarchy_resolver import HierarchyResolver
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import parse_entity_type

from .dtos import EntityRefResponse, ParentChainResponse


class GetParentChainUseCase:
    """Ancestors of an entity, immediate parent first, workspace last."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, entity_type: str, entity_id: UUID) -> Result[ParentChainResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result

            chain_result = await HierarchyResolver(self.uow.entities).parent_chain(
                type_result.value, entity_id
            )
            if chain_result.is_err():
                return chain_result

            return Return.ok(
                ParentChainResponse(
                    chain=[
                        EntityRefResponse(type=ref.type.value, id=str(ref.id))
                        for ref in chain_result.value
                    ]
                )
            )
