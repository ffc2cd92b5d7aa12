from uuid import uuid4

import pytest

from src.app.use_cases.access_requests import (
    CreateAccessRequestUseCase,
    ListMyAccessRequestsUseCase,
    ProcessAccessRequestUseCase,
)
from src.domain.entities import (
    AccessRequest,
    AccessRequestStatus,
    EntityType,
    MemberRole,
    User,
)
from src.domain.errors import ErrorCode


def make_request(target, requester_id=None, **overrides):
    values = dict(
        id=uuid4(),
        workspace_id=target.id,
        requester_id=requester_id,
        email="asker@example.com",
        target_type=target.type,
        target_id=target.id,
        status=AccessRequestStatus.pending,
    )
    values.update(overrides)
    return AccessRequest(**values)


@pytest.mark.asyncio
async def test_user_requests_access(mock_uow, directory):
    workspace = directory.add(EntityType.workspace)
    project = directory.add(EntityType.project, parent=directory.add(EntityType.space, parent=workspace))
    user_id = uuid4()
    mock_uow.users.get_by_id.return_value = User(id=user_id, email="Asker@Example.com")
    mock_uow.access_requests.get_pending.return_value = None

    result = await CreateAccessRequestUseCase(mock_uow).execute(
        user_id, "project", project.id, message="let me in", requested_role="member"
    )

    assert result.is_ok()
    assert result.value.status == "pending"
    assert result.value.email == "asker@example.com"
    created = mock_uow.access_requests.create.call_args.args[0]
    assert created.workspace_id == workspace.id
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_second_pending_request_is_conflict(mock_uow, directory):
    workspace = directory.add(EntityType.workspace)
    user_id = uuid4()
    mock_uow.users.get_by_id.return_value = User(id=user_id, email="asker@example.com")
    mock_uow.access_requests.get_pending.return_value = make_request(workspace, user_id)

    result = await CreateAccessRequestUseCase(mock_uow).execute(user_id, "workspace", workspace.id)

    assert result.error.code == ErrorCode.CONFLICT


@pytest.mark.asyncio
async def test_member_cannot_request_access(mock_uow, directory):
    workspace = directory.add(EntityType.workspace)
    user_id = uuid4()
    directory.grant(workspace, user_id, MemberRole.guest)
    mock_uow.users.get_by_id.return_value = User(id=user_id, email="asker@example.com")

    result = await CreateAccessRequestUseCase(mock_uow).execute(user_id, "workspace", workspace.id)

    assert result.error.code == ErrorCode.CONFLICT


@pytest.mark.asyncio
async def test_approval_grants_requested_role(mock_uow, directory):
    admin, asker = uuid4(), uuid4()
    workspace = directory.add(EntityType.workspace)
    directory.grant(workspace, admin, MemberRole.admin)
    request = make_request(workspace, asker, requested_role=MemberRole.member)
    mock_uow.access_requests.get_by_id.return_value = request
    mock_uow.access_requests.transition_status.return_value = True

    result = await ProcessAccessRequestUseCase(mock_uow).execute(request.id, admin, "approved")

    assert result.is_ok()
    assert result.value.role == "member"
    assert directory.members[(EntityType.workspace, workspace.id, asker)].role == MemberRole.member
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_approval_defaults_to_lowest_role(mock_uow, directory):
    admin, asker = uuid4(), uuid4()
    workspace = directory.add(EntityType.workspace)
    directory.grant(workspace, admin, MemberRole.admin)
    request = make_request(workspace, asker)
    mock_uow.access_requests.get_by_id.return_value = request
    mock_uow.access_requests.transition_status.return_value = True

    result = await ProcessAccessRequestUseCase(mock_uow).execute(request.id, admin, "approved")

    assert result.value.role == MemberRole.guest.value


@pytest.mark.asyncio
async def test_denial_creates_no_membership(mock_uow, directory):
    admin, asker = uuid4(), uuid4()
    workspace = directory.add(EntityType.workspace)
    directory.grant(workspace, admin, MemberRole.admin)
    request = make_request(workspace, asker)
    mock_uow.access_requests.get_by_id.return_value = request
    mock_uow.access_requests.transition_status.return_value = True

    result = await ProcessAccessRequestUseCase(mock_uow).execute(
        request.id, admin, "denied", denial_reason="not now"
    )

    assert result.value.status == "denied"
    assert result.value.membership_id is None
    assert mock_uow.access_requests.transition_status.call_args.kwargs["denial_reason"] == "not now"
    assert (EntityType.workspace, workspace.id, asker) not in directory.members


@pytest.mark.asyncio
async def test_processing_twice_is_conflict(mock_uow, directory):
    workspace = directory.add(EntityType.workspace)
    request = make_request(workspace, uuid4(), status=AccessRequestStatus.approved)
    mock_uow.access_requests.get_by_id.return_value = request

    result = await ProcessAccessRequestUseCase(mock_uow).execute(request.id, uuid4(), "denied")

    assert result.error.code == ErrorCode.CONFLICT


@pytest.mark.asyncio
async def test_pending_is_not_a_decision(mock_uow):
    result = await ProcessAccessRequestUseCase(mock_uow).execute(uuid4(), uuid4(), "pending")

    assert result.error.code == ErrorCode.INVALID_INPUT


@pytest.mark.asyncio
async def test_non_manager_cannot_process(mock_uow, directory):
    member = uuid4()
    workspace = directory.add(EntityType.workspace)
    directory.grant(workspace, member, MemberRole.member)
    request = make_request(workspace, uuid4())
    mock_uow.access_requests.get_by_id.return_value = request

    result = await ProcessAccessRequestUseCase(mock_uow).execute(request.id, member, "approved")

    assert result.error.code == ErrorCode.FORBIDDEN
    mock_uow.access_requests.transition_status.assert_not_called()


@pytest.mark.asyncio
async def test_requester_lists_own_requests(mock_uow, directory):
    workspace = directory.add(EntityType.workspace)
    user_id = uuid4()
    mock_uow.users.get_by_id.return_value = User(id=user_id, email=" Asker@Example.com")
    mock_uow.access_requests.list_by_requester.return_value = [
        make_request(workspace, user_id),
        make_request(workspace, None),
    ]

    result = await ListMyAccessRequestsUseCase(mock_uow).execute(user_id, status="pending")

    assert result.is_ok()
    assert len(result.value.requests) == 2
    mock_uow.access_requests.list_by_requester.assert_awaited_once_with(
        user_id, "asker@example.com", AccessRequestStatus.pending
    )


@pytest.mark.asyncio
async def test_own_requests_with_unknown_status(mock_uow):
    result = await ListMyAccessRequestsUseCase(mock_uow).execute(uuid4(), status="maybe")

    assert result.error.code == ErrorCode.INVALID_INPUT
    mock_uow.access_requests.list_by_requester.assert_not_called()
