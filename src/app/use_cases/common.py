"""
Helpers shared by the use cases: input parsing, target loading and the one
place where memberships are granted.
"""

import logging
from enum import Enum
from typing import Optional, Type, TypeVar
from uuid import UUID

from pydantic import EmailStr, TypeAdapter, ValidationError

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.access_resolver import EffectiveAccessResolver
from src.app.services.hierarchy_resolver import HierarchyResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.access import EntityNode
from src.domain.entities import EntityType, Invitation, MemberBase, MemberRole
from src.domain.errors import DuplicateMembershipError, ErrorCode
from src.domain.roles import valid_member_roles

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

_email_adapter = TypeAdapter(EmailStr)


def parse_entity_type(value) -> Result[EntityType]:
    try:
        return Return.ok(EntityType(value))
    except ValueError:
        return Return.err(
            Error(
                ErrorCode.INVALID_ENTITY_TYPE,
                f"Invalid entity type: {value}. Must be one of: "
                + ", ".join(t.value for t in EntityType),
            )
        )


def parse_enum(enum_cls: Type[E], value, label: str) -> Result[E]:
    try:
        return Return.ok(enum_cls(value))
    except ValueError:
        return Return.err(
            Error(
                ErrorCode.INVALID_INPUT,
                f"Invalid {label}: {value}. Must be one of: "
                + ", ".join(m.value for m in enum_cls),
            )
        )


def normalize_email(email: str) -> Result[str]:
    """Lower-case, trimmed and syntactically valid, or INVALID_INPUT."""
    candidate = (email or "").strip().lower()
    try:
        _email_adapter.validate_python(candidate)
    except ValidationError:
        return Return.err(Error(ErrorCode.INVALID_INPUT, f"Invalid email address: {email}"))
    return Return.ok(candidate)


def invite_url(token: str) -> str:
    return f"{ApplicationConfig.INVITE_BASE_URL}/invite/{token}"


def link_url(link_token: str) -> str:
    return f"{ApplicationConfig.INVITE_BASE_URL}/invite/link/{link_token}"


def resolver_for(uow: UnitOfWork) -> EffectiveAccessResolver:
    return EffectiveAccessResolver(uow.entities, uow.memberships)


async def load_target(uow: UnitOfWork, entity_type: EntityType, entity_id: UUID) -> Result[EntityNode]:
    return await HierarchyResolver(uow.entities).get_node(entity_type, entity_id)


async def workspace_of(uow: UnitOfWork, node: EntityNode) -> Result[UUID]:
    return await HierarchyResolver(uow.entities).workspace_of(node)


async def grant_membership(
    uow: UnitOfWork,
    node: EntityNode,
    user_id: UUID,
    role: MemberRole,
    added_by_id: Optional[UUID] = None,
) -> Result[MemberBase]:
    """
    Create a direct membership inside the caller's transaction.

    On CONFLICT the caller must not commit; leaving the unit of work rolls
    back anything written before (status flips, quota use).
    """
    if role not in valid_member_roles(node.type):
        return Return.err(
            Error(
                ErrorCode.INVALID_INPUT,
                f"Role {role.value} is not valid for a {node.type.value}",
            )
        )

    existing = await uow.memberships.get(node.type, node.id, user_id)
    if existing is not None:
        return Return.err(
            Error(ErrorCode.CONFLICT, f"User is already a member of this {node.type.value}")
        )

    try:
        membership = await uow.memberships.create(node.type, node.id, user_id, role, added_by_id)
    except DuplicateMembershipError as exc:
        logger.warning(f"Concurrent membership insert lost: {exc}")
        return Return.err(
            Error(ErrorCode.CONFLICT, f"User is already a member of this {node.type.value}")
        )

    logger.info(f"Granted {role.value} on {node.ref} to user {user_id}")
    return Return.ok(membership)


async def authorize_invitation_actor(
    uow: UnitOfWork, invitation: Invitation, requester_id: UUID
) -> Result[None]:
    """The inviter, or anyone managing the invitation's target."""
    if invitation.invited_by_id is not None and invitation.invited_by_id == requester_id:
        return Return.ok(None)

    node_result = await load_target(uow, invitation.target_type, invitation.target_id)
    if node_result.is_err():
        return node_result

    manager_result = await resolver_for(uow).require_manager(node_result.value, requester_id)
    if manager_result.is_err():
        return Return.err(
            Error(
                ErrorCode.FORBIDDEN,
                "Only the inviter or a manager of the target can change this invitation",
            )
        )
    return Return.ok(None)
