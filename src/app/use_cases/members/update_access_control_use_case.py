"""
Update Access Control Use Case

Changes visibility and allow-lists of an entity with tri-state updates.
"""

import logging
from typing import Iterable
from uuid import UUID

from libs.field_update import UNSET, FieldUpdate, SetTo, SetToNull, Unset
from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import load_target, parse_entity_type, parse_enum, resolver_for
from src.domain.entities import Visibility
from src.domain.errors import ErrorCode

from .dtos import EntityAccessControlResponse

logger = logging.getLogger(__name__)


def _parse_ids(values: Iterable, label: str) -> Result[list]:
    parsed = []
    for value in values:
        try:
            parsed.append(value if isinstance(value, UUID) else UUID(str(value)))
        except ValueError:
            return Return.err(Error(ErrorCode.INVALID_INPUT, f"Invalid {label} id: {value}"))
    return Return.ok(sorted(set(parsed), key=str))


def _check_update(update) -> Result[None]:
    if not isinstance(update, (Unset, SetToNull, SetTo)):
        return Return.err(Error(ErrorCode.INVALID_INPUT, f"Not a field update: {update!r}"))
    return Return.ok(None)


class UpdateAccessControlUseCase:
    """
    Use case for editing the visibility overlay of an entity.

    Business Rules:
    - Requester must manage the entity
    - Unset leaves a column alone, SetToNull restores its default
      (public / empty list), SetTo writes the value
    - Unknown visibility values and malformed IDs are INVALID_INPUT
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        requester_id: UUID,
        entity_type: str,
        entity_id: UUID,
        visibility: FieldUpdate = UNSET,
        allowed_users: FieldUpdate = UNSET,
        allowed_teams: FieldUpdate = UNSET,
    ) -> Result[EntityAccessControlResponse]:
        async with self.uow:
            type_result = parse_entity_type(entity_type)
            if type_result.is_err():
                return type_result
            target_type = type_result.value

            for update in (visibility, allowed_users, allowed_teams):
                check = _check_update(update)
                if check.is_err():
                    return check

            if isinstance(visibility, SetTo):
                visibility_result = parse_enum(Visibility, visibility.value, "visibility")
                if visibility_result.is_err():
                    return visibility_result
                visibility = SetTo(visibility_result.value)

            if isinstance(allowed_users, SetTo):
                users_result = _parse_ids(allowed_users.value, "user")
                if users_result.is_err():
                    return users_result
                allowed_users = SetTo(users_result.value)

            if isinstance(allowed_teams, SetTo):
                teams_result = _parse_ids(allowed_teams.value, "team")
                if teams_result.is_err():
                    return teams_result
                allowed_teams = SetTo(teams_result.value)

            node_result = await load_target(self.uow, target_type, entity_id)
            if node_result.is_err():
                return node_result

            manager_result = await resolver_for(self.uow).require_manager(
                node_result.value, requester_id
            )
            if manager_result.is_err():
                return manager_result

            node = await self.uow.entities.update_access_control(
                target_type, entity_id, visibility, allowed_users, allowed_teams
            )
            if node is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, f"{target_type.value} not found"))

            await self.uow.commit()
            logger.info(f"User {requester_id} updated access control of {node.ref}")

            return Return.ok(
                EntityAccessControlResponse(
                    entity_type=node.type.value,
                    entity_id=str(node.id),
                    visibility=node.visibility.value,
                    allowed_users=sorted(str(u) for u in node.allowed_users),
                    allowed_teams=sorted(str(t) for t in node.allowed_teams),
                    parent_type=node.parent.type.value if node.parent else None,
                    parent_id=str(node.parent.id) if node.parent else None,
                )
            )
