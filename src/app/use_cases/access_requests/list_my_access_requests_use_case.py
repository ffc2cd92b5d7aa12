from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import parse_enum
from src.domain.entities import AccessRequestStatus
from src.domain.errors import ErrorCode

from .dtos import AccessRequestListResponse
from .mappers import access_request_response


class ListMyAccessRequestsUseCase:
    """
    Requests a user made, newest first.

    Link redemptions made before the account existed are matched by the
    user's email address.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, status: Optional[str] = None
    ) -> Result[AccessRequestListResponse]:
        async with self.uow:
            status_filter = None
            if status is not None:
                status_result = parse_enum(AccessRequestStatus, status, "status")
                if status_result.is_err():
                    return status_result
                status_filter = status_result.value

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "User not found"))

            requests = await self.uow.access_requests.list_by_requester(
                user_id, user.email.strip().lower(), status_filter
            )
            return Return.ok(
                AccessRequestListResponse(requests=[access_request_response(r) for r in requests])
            )
