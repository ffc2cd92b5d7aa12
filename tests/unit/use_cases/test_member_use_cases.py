from uuid import uuid4

import pytest

from src.app.use_cases.members import (
    AddMemberUseCase,
    ListUserMembershipsUseCase,
    RemoveMemberUseCase,
    UpdateMemberRoleUseCase,
)
from src.domain.entities import EntityType, MemberRole, User
from src.domain.errors import ErrorCode


@pytest.mark.asyncio
async def test_sole_owner_cannot_leave(mock_uow, directory):
    """Sole owner removing themselves is refused and stays owner"""
    owner = uuid4()
    workspace = directory.add(EntityType.workspace)
    directory.grant(workspace, owner, MemberRole.owner)

    result = await RemoveMemberUseCase(mock_uow).execute(owner, "workspace", workspace.id, owner)

    assert result.is_err()
    assert result.error.code == ErrorCode.LAST_OWNER
    assert directory.members[(EntityType.workspace, workspace.id, owner)].role == MemberRole.owner
    mock_uow.memberships.delete.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_owner_can_leave_when_another_owner_exists(mock_uow, directory):
    owner1, owner2 = uuid4(), uuid4()
    workspace = directory.add(EntityType.workspace)
    directory.grant(workspace, owner1, MemberRole.owner)
    directory.grant(workspace, owner2, MemberRole.owner)

    result = await RemoveMemberUseCase(mock_uow).execute(owner1, "workspace", workspace.id, owner1)

    assert result.is_ok()
    assert result.value.status == "removed"
    assert (EntityType.workspace, workspace.id, owner1) not in directory.members
    mock_uow.entities.lock_workspace.assert_awaited_once_with(workspace.id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_member_cannot_remove_admin(mock_uow, directory):
    member, admin = uuid4(), uuid4()
    workspace = directory.add(EntityType.workspace)
    directory.grant(workspace, member, MemberRole.member)
    directory.grant(workspace, admin, MemberRole.admin)

    result = await RemoveMemberUseCase(mock_uow).execute(member, "workspace", workspace.id, admin)

    assert result.error.code == ErrorCode.FORBIDDEN


@pytest.mark.asyncio
async def test_demoting_last_owner_is_refused(mock_uow, directory):
    owner = uuid4()
    workspace = directory.add(EntityType.workspace)
    directory.grant(workspace, owner, MemberRole.owner)

    result = await UpdateMemberRoleUseCase(mock_uow).execute(
        owner, "workspace", workspace.id, owner, "admin"
    )

    assert result.error.code == ErrorCode.LAST_OWNER
    mock_uow.memberships.update_role.assert_not_called()


@pytest.mark.asyncio
async def test_admin_adds_member_to_space(mock_uow, directory):
    admin, newcomer = uuid4(), uuid4()
    workspace = directory.add(EntityType.workspace)
    space = directory.add(EntityType.space, parent=workspace)
    directory.grant(workspace, admin, MemberRole.admin)
    mock_uow.users.get_by_id.return_value = User(id=newcomer, email="new@acme.com")

    result = await AddMemberUseCase(mock_uow).execute(
        admin, "space", space.id, newcomer, "member"
    )

    assert result.is_ok()
    assert result.value.role == "member"
    assert (EntityType.space, space.id, newcomer) in directory.members
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_role_outside_entity_role_set_is_invalid(mock_uow, directory):
    admin = uuid4()
    workspace = directory.add(EntityType.workspace)
    space = directory.add(EntityType.space, parent=workspace)
    directory.grant(workspace, admin, MemberRole.admin)

    result = await AddMemberUseCase(mock_uow).execute(admin, "space", space.id, uuid4(), "owner")

    assert result.error.code == ErrorCode.INVALID_INPUT


@pytest.mark.asyncio
async def test_creator_bootstraps_empty_workspace(mock_uow, directory):
    creator = uuid4()
    workspace = directory.add(EntityType.workspace, created_by_id=creator)
    mock_uow.users.get_by_id.return_value = User(id=creator, email="founder@acme.com")

    result = await AddMemberUseCase(mock_uow).execute(
        creator, "workspace", workspace.id, creator, "owner"
    )

    assert result.is_ok()
    assert directory.members[(EntityType.workspace, workspace.id, creator)].role == MemberRole.owner


@pytest.mark.asyncio
async def test_unknown_entity_type(mock_uow):
    result = await AddMemberUseCase(mock_uow).execute(uuid4(), "board", uuid4(), uuid4(), "member")

    assert result.error.code == ErrorCode.INVALID_ENTITY_TYPE


@pytest.mark.asyncio
async def test_user_memberships_grouped_by_type(mock_uow, directory, workspace_tree):
    workspace, _, _, project, _ = workspace_tree
    user_id = uuid4()
    directory.grant(workspace, user_id, MemberRole.member)
    directory.grant(project, user_id, MemberRole.lead)
    directory.grant(project, uuid4(), MemberRole.member)
    mock_uow.users.get_by_id.return_value = User(id=user_id, email="dev@acme.com")

    result = await ListUserMembershipsUseCase(mock_uow).execute(user_id)

    assert result.is_ok()
    memberships = result.value.memberships
    assert set(memberships) == {t.value for t in EntityType}
    assert [m.entity_id for m in memberships["workspace"]] == [str(workspace.id)]
    assert [m.role for m in memberships["project"]] == ["lead"]
    assert memberships["task"] == []


@pytest.mark.asyncio
async def test_user_memberships_of_unknown_user(mock_uow):
    mock_uow.users.get_by_id.return_value = None

    result = await ListUserMembershipsUseCase(mock_uow).execute(uuid4())

    assert result.error.code == ErrorCode.NOT_FOUND
