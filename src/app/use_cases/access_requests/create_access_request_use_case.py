"""
Create Access Request Use Case
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import load_target, parse_entity_type, parse_enum, workspace_of
from src.domain.base import utc_now
from src.domain.entities import AccessRequest, AccessRequestStatus, MemberRole
from src.domain.errors import ErrorCode
from src.domain.roles import valid_invitation_roles

from .dtos import AccessRequestResponse
from .mappers import access_request_response

logger = logging.getLogger(__name__)


class CreateAccessRequestUseCase:
    """
    Use case for a user asking to join an entity.

    Business Rules:
    - Target must exist; requested role, if any, must be valid for it
    - Direct members cannot ask again (CONFLICT)
    - One pending request per user and target (CONFLICT)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        requester_id: UUID,
        target_type: str,
        target_id: UUID,
        message: Optional[str] = None,
        requested_role: Optional[str] = None,
    ) -> Result[AccessRequestResponse]:
        async with self.uow:
            type_result = parse_entity_type(target_type)
            if type_result.is_err():
                return type_result
            entity_type = type_result.value

            role = None
            if requested_role is not None:
                role_result = parse_enum(MemberRole, requested_role, "role")
                if role_result.is_err():
                    return role_result
                role = role_result.value
                if role not in valid_invitation_roles(entity_type):
                    return Return.err(
                        Error(
                            ErrorCode.INVALID_INPUT,
                            f"Role {role.value} cannot be requested on a {entity_type.value}",
                        )
                    )

            user = await self.uow.users.get_by_id(requester_id)
            if user is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "User not found"))
            email = user.email.strip().lower()

            node_result = await load_target(self.uow, entity_type, target_id)
            if node_result.is_err():
                return node_result

            workspace_result = await workspace_of(self.uow, node_result.value)
            if workspace_result.is_err():
                return workspace_result

            if await self.uow.memberships.get(entity_type, target_id, requester_id) is not None:
                return Return.err(
                    Error(ErrorCode.CONFLICT, f"You are already a member of this {entity_type.value}")
                )

            if await self.uow.access_requests.get_pending(entity_type, target_id, email) is not None:
                return Return.err(
                    Error(ErrorCode.CONFLICT, "A pending access request already exists")
                )

            now = utc_now()
            access_request = await self.uow.access_requests.create(
                AccessRequest(
                    workspace_id=workspace_result.value,
                    requester_id=requester_id,
                    email=email,
                    target_type=entity_type,
                    target_id=target_id,
                    message=message,
                    requested_role=role,
                    status=AccessRequestStatus.pending,
                    created_at=now,
                    updated_at=now,
                )
            )
            await self.uow.commit()

            logger.info(f"User {requester_id} requested access to {node_result.value.ref}")
            return Return.ok(access_request_response(access_request))
