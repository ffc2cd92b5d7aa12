"""
List User Memberships Use Case
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import EntityType
from src.domain.errors import ErrorCode

from .dtos import MemberResponse, UserMembershipsResponse


class ListUserMembershipsUseCase:
    """
    Direct memberships of a user, grouped by entity type.

    Business Rules:
    - Only direct rows are listed; inherited access is not expanded
    - Every entity type appears as a key, possibly with an empty list
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UserMembershipsResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "User not found"))

            memberships = {}
            for entity_type in EntityType:
                rows = await self.uow.memberships.list_by_user(entity_type, user_id)
                memberships[entity_type.value] = [
                    MemberResponse(
                        membership_id=str(m.id),
                        entity_type=entity_type.value,
                        entity_id=str(m.entity_id),
                        user_id=str(m.user_id),
                        role=m.role.value,
                    )
                    for m in rows
                ]

            return Return.ok(UserMembershipsResponse(user_id=str(user_id), memberships=memberships))
