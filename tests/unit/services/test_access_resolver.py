from uuid import uuid4

import pytest

from src.app.services.access_resolver import ALLOW_LIST_ROLE, EffectiveAccessResolver
from src.app.services.hierarchy_resolver import HierarchyResolver
from src.domain.entities import EntityType, MemberRole, PermissionAction, Visibility
from src.domain.errors import ErrorCode


@pytest.fixture
def resolver(mock_uow, directory):
    return EffectiveAccessResolver(mock_uow.entities, mock_uow.memberships)


@pytest.mark.asyncio
async def test_parent_chain_runs_up_to_the_workspace(mock_uow, workspace_tree):
    workspace, space, folder, project, task = workspace_tree

    result = await HierarchyResolver(mock_uow.entities).parent_chain(EntityType.task, task.id)

    assert result.is_ok()
    assert [ref.type for ref in result.value] == [
        EntityType.project,
        EntityType.folder,
        EntityType.space,
        EntityType.workspace,
    ]
    assert result.value[-1].id == workspace.id


@pytest.mark.asyncio
async def test_project_without_folder_hangs_off_its_space(mock_uow, directory, workspace_tree):
    workspace, space, _, _, _ = workspace_tree
    loose = directory.add(EntityType.project, parent=space)

    result = await HierarchyResolver(mock_uow.entities).parent_chain(EntityType.project, loose.id)

    assert [ref.id for ref in result.value] == [space.id, workspace.id]


@pytest.mark.asyncio
async def test_dangling_parent_is_not_found(mock_uow, directory, workspace_tree):
    _, space, _, _, _ = workspace_tree
    orphan_folder = directory.add(EntityType.folder, parent=space)
    del directory.nodes[(EntityType.space, space.id)]

    result = await HierarchyResolver(mock_uow.entities).parent_chain(
        EntityType.folder, orphan_folder.id
    )

    assert result.is_err()
    assert result.error.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_workspace_owner_inherits_on_space(resolver, directory, workspace_tree):
    workspace, space, _, _, _ = workspace_tree
    owner = uuid4()
    directory.grant(workspace, owner, MemberRole.owner)

    result = await resolver.get_access_level(EntityType.space, space.id, owner)

    assert result.is_ok()
    assert result.value.role == MemberRole.owner
    assert result.value.origin.id == workspace.id


@pytest.mark.asyncio
async def test_nearest_ancestor_grant_wins(resolver, directory, workspace_tree):
    workspace, space, folder, project, task = workspace_tree
    user = uuid4()
    directory.grant(workspace, user, MemberRole.guest)
    directory.grant(folder, user, MemberRole.member)

    result = await resolver.get_access_level(EntityType.task, task.id, user)

    assert result.value.role == MemberRole.member
    assert result.value.origin.id == folder.id


@pytest.mark.asyncio
async def test_direct_membership_precedes_inherited(resolver, directory, workspace_tree):
    workspace, _, _, project, _ = workspace_tree
    user = uuid4()
    directory.grant(workspace, user, MemberRole.admin)
    directory.grant(project, user, MemberRole.guest)

    result = await resolver.get_access_level(EntityType.project, project.id, user)

    assert result.value.role == MemberRole.guest
    assert result.value.origin is None
    assert not result.value.is_inherited


@pytest.mark.asyncio
async def test_no_access_is_unauthorized(resolver, workspace_tree):
    _, space, _, _, _ = workspace_tree

    result = await resolver.get_access_level(EntityType.space, space.id, uuid4())

    assert result.is_err()
    assert result.error.code == ErrorCode.UNAUTHORIZED

    has_access = await resolver.has_effective_access(EntityType.space, space.id, uuid4())
    assert has_access.is_ok()
    assert has_access.value is False


@pytest.mark.asyncio
async def test_unknown_entity_is_not_found(resolver):
    result = await resolver.has_effective_access(EntityType.folder, uuid4(), uuid4())

    assert result.is_err()
    assert result.error.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_restricted_space_gates_inherited_member(resolver, directory):
    workspace = directory.add(EntityType.workspace)
    private = directory.add(EntityType.space, parent=workspace, visibility=Visibility.restricted)
    member, admin = uuid4(), uuid4()
    directory.grant(workspace, member, MemberRole.member)
    directory.grant(workspace, admin, MemberRole.admin)

    blocked = await resolver.get_access_level(EntityType.space, private.id, member)
    allowed = await resolver.get_access_level(EntityType.space, private.id, admin)

    assert blocked.error.code == ErrorCode.UNAUTHORIZED
    assert allowed.value.role == MemberRole.admin


@pytest.mark.asyncio
async def test_restricted_space_admits_listed_team(resolver, directory):
    workspace = directory.add(EntityType.workspace)
    team_id = uuid4()
    private = directory.add(
        EntityType.space,
        parent=workspace,
        visibility=Visibility.restricted,
        allowed_teams={team_id},
    )
    folder = directory.add(EntityType.folder, parent=private)
    user = uuid4()
    directory.grant(workspace, user, MemberRole.member)
    directory.join_team(user, team_id)

    result = await resolver.get_access_level(EntityType.folder, folder.id, user)

    assert result.value.role == MemberRole.member
    assert result.value.origin.id == workspace.id


@pytest.mark.asyncio
async def test_allow_list_grants_member_without_cascading(resolver, directory):
    workspace = directory.add(EntityType.workspace)
    user = uuid4()
    space = directory.add(EntityType.space, parent=workspace, allowed_users={user})
    folder = directory.add(EntityType.folder, parent=space)

    on_space = await resolver.get_access_info(EntityType.space, space.id, user)
    on_folder = await resolver.get_access_info(EntityType.folder, folder.id, user)

    assert on_space.value.has_access
    assert on_space.value.role == ALLOW_LIST_ROLE
    assert on_space.value.via_allow_list
    assert not on_space.value.can_manage
    assert not on_folder.value.has_access


@pytest.mark.asyncio
async def test_effective_members_merge_direct_and_inherited(resolver, directory, workspace_tree):
    workspace, space, _, _, _ = workspace_tree
    owner, member, guest = uuid4(), uuid4(), uuid4()
    directory.grant(workspace, owner, MemberRole.owner)
    directory.grant(workspace, member, MemberRole.member)
    directory.grant(space, member, MemberRole.guest)
    directory.grant(space, guest, MemberRole.guest)

    result = await resolver.list_effective_members(EntityType.space, space.id)

    by_user = {m.user_id: m for m in result.value}
    assert set(by_user) == {owner, member, guest}
    assert by_user[member].role == MemberRole.guest
    assert not by_user[member].is_inherited
    assert by_user[owner].is_inherited
    assert by_user[owner].inherited_from.id == workspace.id

    direct = await resolver.list_direct_members(EntityType.space, space.id)
    assert {m.user_id for m in direct.value} == {member, guest}


@pytest.mark.asyncio
async def test_require_manager(resolver, directory, workspace_tree):
    workspace, _, _, project, _ = workspace_tree
    lead, member = uuid4(), uuid4()
    directory.grant(project, lead, MemberRole.lead)
    directory.grant(workspace, member, MemberRole.member)

    assert (await resolver.require_manager(project, lead)).is_ok()
    denied = await resolver.require_manager(project, member)
    assert denied.error.code == ErrorCode.FORBIDDEN


@pytest.mark.asyncio
async def test_check_permission_separates_edit_from_manage(resolver, directory, workspace_tree):
    _, _, _, project, task = workspace_tree
    dev = uuid4()
    directory.grant(project, dev, MemberRole.member)

    can_edit = await resolver.check_permission(
        EntityType.task, task.id, dev, PermissionAction.edit
    )
    can_delete = await resolver.check_permission(
        EntityType.task, task.id, dev, PermissionAction.delete
    )

    assert can_edit.value is True
    assert can_delete.value is False


@pytest.mark.asyncio
async def test_check_permission_without_access_is_false(resolver, workspace_tree):
    _, space, _, _, _ = workspace_tree

    result = await resolver.check_permission(
        EntityType.space, space.id, uuid4(), PermissionAction.view
    )

    assert result.is_ok()
    assert result.value is False


@pytest.mark.asyncio
async def test_check_permission_on_missing_entity_is_not_found(resolver):
    result = await resolver.check_permission(
        EntityType.project, uuid4(), uuid4(), PermissionAction.view
    )

    assert result.error.code == ErrorCode.NOT_FOUND
