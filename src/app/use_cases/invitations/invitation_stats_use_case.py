"""
Invitation Stats Use Cases

Outcome counts for managers: per target, or across a whole workspace.
"""

from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import load_target, parse_entity_type, resolver_for
from src.domain.entities import EntityType, InvitationStats

from .dtos import InvitationStatsResponse


def stats_response(scope_type: EntityType, scope_id: UUID, stats: InvitationStats):
    return InvitationStatsResponse(
        scope_type=scope_type.value,
        scope_id=str(scope_id),
        **stats.model_dump(),
    )


class GetInvitationStatsUseCase:
    """
    Invitation outcomes on one target.

    Business Rules:
    - Requester must manage the target (UNAUTHORIZED / FORBIDDEN)
    - Acceptance rate counts accepted over accepted + declined
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, requester_id: UUID, target_type: str, target_id: UUID
    ) -> Result[InvitationStatsResponse]:
        async with self.uow:
            type_result = parse_entity_type(target_type)
            if type_result.is_err():
                return type_result

            node_result = await load_target(self.uow, type_result.value, target_id)
            if node_result.is_err():
                return node_result

            manager_result = await resolver_for(self.uow).require_manager(
                node_result.value, requester_id
            )
            if manager_result.is_err():
                return manager_result

            stats = await self.uow.invitations.get_stats_by_target(type_result.value, target_id)
            return Return.ok(stats_response(type_result.value, target_id, stats))


class GetWorkspaceInvitationStatsUseCase:
    """Invitation outcomes on every target inside a workspace; workspace managers only."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, requester_id: UUID, workspace_id: UUID
    ) -> Result[InvitationStatsResponse]:
        async with self.uow:
            node_result = await load_target(self.uow, EntityType.workspace, workspace_id)
            if node_result.is_err():
                return node_result

            manager_result = await resolver_for(self.uow).require_manager(
                node_result.value, requester_id
            )
            if manager_result.is_err():
                return manager_result

            stats = await self.uow.invitations.get_stats_by_workspace(workspace_id)
            return Return.ok(stats_response(EntityType.workspace, workspace_id, stats))
