from uuid import uuid4

import pytest

from src.app.use_cases.access import CheckPermissionUseCase
from src.domain.entities import EntityType, MemberRole
from src.domain.errors import ErrorCode


@pytest.mark.asyncio
async def test_member_may_edit_but_not_delete_project(mock_uow, directory, workspace_tree):
    _, _, _, project, _ = workspace_tree
    dev = uuid4()
    directory.grant(project, dev, MemberRole.member)

    edit = await CheckPermissionUseCase(mock_uow).execute("project", project.id, dev, "edit")
    delete = await CheckPermissionUseCase(mock_uow).execute("project", project.id, dev, "delete")

    assert edit.value.allowed is True
    assert edit.value.action == "edit"
    assert delete.value.allowed is False


@pytest.mark.asyncio
async def test_unknown_action_is_invalid_input(mock_uow, workspace_tree):
    _, _, _, project, _ = workspace_tree

    result = await CheckPermissionUseCase(mock_uow).execute(
        "project", project.id, uuid4(), "archive"
    )

    assert result.error.code == ErrorCode.INVALID_INPUT


@pytest.mark.asyncio
async def test_unknown_entity_type(mock_uow):
    result = await CheckPermissionUseCase(mock_uow).execute("board", uuid4(), uuid4(), "view")

    assert result.error.code == ErrorCode.INVALID_ENTITY_TYPE
