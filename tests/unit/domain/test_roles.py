import pytest

from src.domain.entities import EntityType, MemberRole, PermissionAction, PermissionLevel
from src.domain.roles import (
    action_allowed,
    default_permission_for_role,
    highest_role,
    is_manager_role,
    lowest_role,
    outranks_or_equals,
    role_rank,
    valid_invitation_roles,
    valid_member_roles,
)


def test_role_order_is_total():
    ordered = [
        MemberRole.owner,
        MemberRole.admin,
        MemberRole.lead,
        MemberRole.member,
        MemberRole.limited_member,
        MemberRole.guest,
    ]
    ranks = [role_rank(role) for role in ordered]
    assert ranks == sorted(ranks, reverse=True)
    assert len(set(ranks)) == len(ranks)


def test_outranks_or_equals():
    assert outranks_or_equals(MemberRole.owner, MemberRole.admin)
    assert outranks_or_equals(MemberRole.member, MemberRole.member)
    assert not outranks_or_equals(MemberRole.guest, MemberRole.limited_member)


def test_highest_role():
    assert highest_role([MemberRole.guest, MemberRole.lead, MemberRole.member]) == MemberRole.lead
    assert highest_role([]) is None


def test_owner_is_never_offered_by_invitation():
    assert MemberRole.owner in valid_member_roles(EntityType.workspace)
    assert MemberRole.owner not in valid_invitation_roles(EntityType.workspace)


@pytest.mark.parametrize(
    "entity_type,expected",
    [
        (EntityType.workspace, MemberRole.guest),
        (EntityType.project, MemberRole.guest),
        (EntityType.team, MemberRole.member),
    ],
)
def test_lowest_role(entity_type, expected):
    assert lowest_role(entity_type) == expected


def test_lead_manages_projects_and_tasks_only():
    assert is_manager_role(MemberRole.lead, EntityType.project)
    assert is_manager_role(MemberRole.lead, EntityType.task)
    assert not is_manager_role(MemberRole.lead, EntityType.space)
    assert is_manager_role(MemberRole.admin, EntityType.space)
    assert not is_manager_role(MemberRole.member, EntityType.project)


def test_default_permission_follows_role():
    assert default_permission_for_role(MemberRole.owner) == PermissionLevel.full_edit
    assert default_permission_for_role(MemberRole.member) == PermissionLevel.edit
    assert default_permission_for_role(MemberRole.guest) == PermissionLevel.view_only


@pytest.mark.parametrize(
    "role,entity_type,action,expected",
    [
        (MemberRole.guest, EntityType.project, PermissionAction.view, True),
        (MemberRole.guest, EntityType.project, PermissionAction.edit, False),
        (MemberRole.limited_member, EntityType.task, PermissionAction.edit, False),
        (MemberRole.member, EntityType.project, PermissionAction.edit, True),
        (MemberRole.member, EntityType.project, PermissionAction.manage, False),
        (MemberRole.member, EntityType.space, PermissionAction.edit, False),
        (MemberRole.lead, EntityType.task, PermissionAction.delete, True),
        (MemberRole.lead, EntityType.space, PermissionAction.manage, False),
        (MemberRole.admin, EntityType.workspace, PermissionAction.delete, True),
    ],
)
def test_action_thresholds(role, entity_type, action, expected):
    assert action_allowed(role, entity_type, action) is expected


def test_allow_list_access_never_manages():
    assert action_allowed(MemberRole.member, EntityType.project, PermissionAction.edit, True)
    assert not action_allowed(MemberRole.member, EntityType.project, PermissionAction.delete, True)
    assert not action_allowed(MemberRole.admin, EntityType.space, PermissionAction.manage, True)
