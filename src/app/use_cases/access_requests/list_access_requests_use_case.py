from typing import Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import load_target, parse_entity_type, parse_enum, resolver_for
from src.domain.entities import AccessRequestStatus

from .dtos import AccessRequestListResponse
from .mappers import access_request_response


class ListAccessRequestsUseCase:
    """Access requests on an entity, newest first; managers only."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        requester_id: UUID,
        target_type: str,
        target_id: UUID,
        status: Optional[str] = None,
    ) -> Result[AccessRequestListResponse]:
        async with self.uow:
            type_result = parse_entity_type(target_type)
            if type_result.is_err():
                return type_result

            status_filter = None
            if status is not None:
                status_result = parse_enum(AccessRequestStatus, status, "status")
                if status_result.is_err():
                    return status_result
                status_filter = status_result.value

            node_result = await load_target(self.uow, type_result.value, target_id)
            if node_result.is_err():
                return node_result

            manager_result = await resolver_for(self.uow).require_manager(
                node_result.value, requester_id
            )
            if manager_result.is_err():
                return manager_result

            requests = await self.uow.access_requests.list_by_target(
                type_result.value, target_id, status_filter
            )
            return Return.ok(
                AccessRequestListResponse(requests=[access_request_response(r) for r in requests])
            )
