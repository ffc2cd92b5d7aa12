"""
Role Comparator

Fixed total order over member roles plus the per-entity-type role sets.
"""

from typing import FrozenSet, Iterable, Optional

from src.domain.entities.enums import EntityType, MemberRole, PermissionAction, PermissionLevel

ROLE_RANK = {
    MemberRole.owner: 5,
    MemberRole.admin: 4,
    MemberRole.lead: 3,
    MemberRole.member: 2,
    MemberRole.limited_member: 1,
    MemberRole.guest: 0,
}

# Grants held with these roles cross restricted entities
BYPASS_ROLES = frozenset({MemberRole.owner, MemberRole.admin})

_MEMBER_ROLES = {
    EntityType.workspace: frozenset(
        {
            MemberRole.owner,
            MemberRole.admin,
            MemberRole.member,
            MemberRole.limited_member,
            MemberRole.guest,
        }
    ),
    EntityType.space: frozenset({MemberRole.member, MemberRole.limited_member, MemberRole.guest}),
    EntityType.folder: frozenset({MemberRole.member, MemberRole.limited_member, MemberRole.guest}),
    EntityType.project: frozenset(
        {MemberRole.lead, MemberRole.member, MemberRole.limited_member, MemberRole.guest}
    ),
    EntityType.task: frozenset({MemberRole.limited_member, MemberRole.guest}),
    EntityType.team: frozenset({MemberRole.member}),
}

# Entity types whose content members may edit; elsewhere editing is managing
_MEMBER_EDITABLE = frozenset({EntityType.project, EntityType.task})

_DEFAULT_PERMISSION = {
    MemberRole.owner: PermissionLevel.full_edit,
    MemberRole.admin: PermissionLevel.full_edit,
    MemberRole.lead: PermissionLevel.full_edit,
    MemberRole.member: PermissionLevel.edit,
    MemberRole.limited_member: PermissionLevel.comment,
    MemberRole.guest: PermissionLevel.view_only,
}


def role_rank(role: MemberRole) -> int:
    return ROLE_RANK[MemberRole(role)]


def outranks_or_equals(role: MemberRole, other: MemberRole) -> bool:
    return role_rank(role) >= role_rank(other)


def highest_role(roles: Iterable[MemberRole]) -> Optional[MemberRole]:
    ranked = sorted(roles, key=role_rank, reverse=True)
    return ranked[0] if ranked else None


def valid_member_roles(entity_type: EntityType) -> FrozenSet[MemberRole]:
    """Roles a direct membership on this entity type may hold."""
    return _MEMBER_ROLES[entity_type]


def valid_invitation_roles(entity_type: EntityType) -> FrozenSet[MemberRole]:
    """Roles that may be offered by invitation; ownership is never invited."""
    return _MEMBER_ROLES[entity_type] - {MemberRole.owner}


def default_permission_for_role(role: MemberRole) -> PermissionLevel:
    return _DEFAULT_PERMISSION[role]


def is_manager_role(role: MemberRole, entity_type: EntityType) -> bool:
    """Owners and admins manage everything; leads manage their project and its tasks."""
    if role in BYPASS_ROLES:
        return True
    return role == MemberRole.lead and entity_type in (EntityType.project, EntityType.task)


def lowest_role(entity_type: EntityType) -> MemberRole:
    """Least privileged role that may be granted on this entity type."""
    return min(valid_invitation_roles(entity_type), key=role_rank)


def action_allowed(
    role: MemberRole,
    entity_type: EntityType,
    action: PermissionAction,
    via_allow_list: bool = False,
) -> bool:
    """
    Whether an effective role permits an action on an entity.

    Viewing needs any access. Editing a project or task needs member or
    above; on other entity types it needs a managing role. Manage and delete
    need a managing role held through a membership, not an allow-list.
    """
    if action == PermissionAction.view:
        return True
    if action == PermissionAction.edit and entity_type in _MEMBER_EDITABLE:
        return outranks_or_equals(role, MemberRole.member)
    return not via_allow_list and is_manager_role(role, entity_type)
