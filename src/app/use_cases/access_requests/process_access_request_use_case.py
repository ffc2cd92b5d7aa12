"""
Process Access Request Use Case

Approve or deny a pending request. Approval grants the membership in the
same transaction as the status change.
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import grant_membership, load_target, parse_enum, resolver_for
from src.domain.base import utc_now
from src.domain.entities import AccessRequestStatus, MemberRole
from src.domain.errors import ErrorCode
from src.domain.roles import lowest_role, outranks_or_equals, valid_invitation_roles

from .dtos import ProcessAccessRequestResponse

logger = logging.getLogger(__name__)


class ProcessAccessRequestUseCase:
    """
    Use case for approving or denying an access request.

    Business Rules:
    - status is approved or denied (INVALID_INPUT otherwise)
    - Processor must manage the target
    - Granted role: explicit role, else the requested role, else the lowest
      role of the target type; never above the processor's own role
    - pending -> status is a conditional update; re-processing is CONFLICT
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        request_id: UUID,
        processor_id: UUID,
        status: str,
        denial_reason: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Result[ProcessAccessRequestResponse]:
        async with self.uow:
            status_result = parse_enum(AccessRequestStatus, status, "status")
            if status_result.is_err():
                return status_result
            new_status = status_result.value
            if new_status == AccessRequestStatus.pending:
                return Return.err(
                    Error(ErrorCode.INVALID_INPUT, "status must be approved or denied")
                )

            access_request = await self.uow.access_requests.get_by_id(request_id)
            if access_request is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "Access request not found"))

            if access_request.status != AccessRequestStatus.pending:
                return Return.err(
                    Error(
                        ErrorCode.CONFLICT,
                        f"This access request has already been {access_request.status.value}",
                    )
                )

            node_result = await load_target(
                self.uow, access_request.target_type, access_request.target_id
            )
            if node_result.is_err():
                return node_result
            node = node_result.value

            manager_result = await resolver_for(self.uow).require_manager(node, processor_id)
            if manager_result.is_err():
                return manager_result

            granted_role = None
            requester_id = access_request.requester_id
            if new_status == AccessRequestStatus.approved:
                if role is not None:
                    role_result = parse_enum(MemberRole, role, "role")
                    if role_result.is_err():
                        return role_result
                    granted_role = role_result.value
                else:
                    granted_role = access_request.requested_role or lowest_role(node.type)

                if granted_role not in valid_invitation_roles(node.type):
                    return Return.err(
                        Error(
                            ErrorCode.INVALID_INPUT,
                            f"Role {granted_role.value} cannot be granted on a {node.type.value}",
                        )
                    )
                if not outranks_or_equals(manager_result.value.role, granted_role):
                    return Return.err(
                        Error(
                            ErrorCode.FORBIDDEN,
                            f"Cannot grant {granted_role.value}, above your own role",
                        )
                    )

                if requester_id is None:
                    user = await self.uow.users.get_by_email(access_request.email)
                    if user is None:
                        return Return.err(
                            Error(
                                ErrorCode.INVALID_INPUT,
                                "Requester has no account yet; ask them to sign up first",
                            )
                        )
                    requester_id = user.id

            if not await self.uow.access_requests.transition_status(
                request_id,
                new_status,
                processor_id,
                utc_now(),
                denial_reason=denial_reason if new_status == AccessRequestStatus.denied else None,
            ):
                return Return.err(
                    Error(ErrorCode.CONFLICT, "This access request is no longer pending")
                )

            membership_id = None
            if new_status == AccessRequestStatus.approved:
                grant_result = await grant_membership(
                    self.uow, node, requester_id, granted_role, added_by_id=processor_id
                )
                if grant_result.is_err():
                    return grant_result
                membership_id = str(grant_result.value.id)

            await self.uow.commit()
            logger.info(
                f"User {processor_id} {new_status.value} access request {request_id} for {node.ref}"
            )

            return Return.ok(
                ProcessAccessRequestResponse(
                    request_id=str(request_id),
                    status=new_status.value,
                    membership_id=membership_id,
                    role=granted_role.value if granted_role else None,
                )
            )
