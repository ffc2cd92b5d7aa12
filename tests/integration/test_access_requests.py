from uuid import UUID

import pytest

from src.app.use_cases.access import GetAccessLevelUseCase
from src.app.use_cases.access_requests import (
    CreateAccessRequestUseCase,
    ListAccessRequestsUseCase,
    ListMyAccessRequestsUseCase,
    ProcessAccessRequestUseCase,
)
from src.app.use_cases.links import CreateLinkSettingsUseCase, UseInvitationLinkUseCase
from src.domain.entities import EntityType, MemberRole
from src.domain.errors import ErrorCode


@pytest.mark.asyncio
async def test_request_then_approve(seed, uow_factory):
    admin = await seed.user("admin@acme.com")
    asker = await seed.user("asker@acme.com")
    workspace = await seed.workspace()
    space = await seed.space(workspace)
    await seed.grant(EntityType.workspace, workspace, admin, MemberRole.admin)

    requested = await CreateAccessRequestUseCase(uow_factory()).execute(
        asker.id, "space", space.id, message="need the docs", requested_role="member"
    )
    duplicate = await CreateAccessRequestUseCase(uow_factory()).execute(asker.id, "space", space.id)
    request_id = UUID(requested.value.request_id)

    listed = await ListAccessRequestsUseCase(uow_factory()).execute(
        admin.id, "space", space.id, status="pending"
    )
    approved = await ProcessAccessRequestUseCase(uow_factory()).execute(
        request_id, admin.id, "approved"
    )
    twice = await ProcessAccessRequestUseCase(uow_factory()).execute(request_id, admin.id, "denied")
    access = await GetAccessLevelUseCase(uow_factory()).execute("space", space.id, asker.id)

    assert duplicate.error.code == ErrorCode.CONFLICT
    assert [r.request_id for r in listed.value.requests] == [requested.value.request_id]
    assert approved.value.status == "approved"
    assert approved.value.role == "member"
    assert twice.error.code == ErrorCode.CONFLICT
    assert access.value.role == "member"
    assert not access.value.is_inherited


@pytest.mark.asyncio
async def test_denied_request_grants_nothing(seed, uow_factory):
    owner = await seed.user("owner@acme.com")
    asker = await seed.user("asker@acme.com")
    workspace = await seed.workspace()
    await seed.grant(EntityType.workspace, workspace, owner, MemberRole.owner)

    requested = await CreateAccessRequestUseCase(uow_factory()).execute(
        asker.id, "workspace", workspace.id
    )
    denied = await ProcessAccessRequestUseCase(uow_factory()).execute(
        UUID(requested.value.request_id), owner.id, "denied", denial_reason="contractors only"
    )
    access = await GetAccessLevelUseCase(uow_factory()).execute("workspace", workspace.id, asker.id)
    history = await ListAccessRequestsUseCase(uow_factory()).execute(owner.id, "workspace", workspace.id)

    assert denied.value.status == "denied"
    assert access.error.code == ErrorCode.UNAUTHORIZED
    assert history.value.requests[0].denial_reason == "contractors only"


@pytest.mark.asyncio
async def test_approval_link_creates_request_for_new_address(seed, uow_factory):
    owner = await seed.user("owner@acme.com")
    workspace = await seed.workspace()
    await seed.grant(EntityType.workspace, workspace, owner, MemberRole.owner)
    link = await CreateLinkSettingsUseCase(uow_factory()).execute(
        owner.id, "workspace", workspace.id, "guest", requires_approval=True
    )

    redeemed = await UseInvitationLinkUseCase(uow_factory()).execute(
        link.value.link_token, "newbie@example.com"
    )
    early = await ProcessAccessRequestUseCase(uow_factory()).execute(
        UUID(redeemed.value.access_request_id), owner.id, "approved"
    )
    newbie = await seed.user("newbie@example.com")
    approved = await ProcessAccessRequestUseCase(uow_factory()).execute(
        UUID(redeemed.value.access_request_id), owner.id, "approved"
    )
    access = await GetAccessLevelUseCase(uow_factory()).execute("workspace", workspace.id, newbie.id)

    assert redeemed.value.kind == "access_request"
    assert early.error.code == ErrorCode.INVALID_INPUT
    assert approved.value.role == "guest"
    assert access.value.role == "guest"


@pytest.mark.asyncio
async def test_member_cannot_list_requests(seed, uow_factory):
    member = await seed.user("member@acme.com")
    workspace = await seed.workspace()
    await seed.grant(EntityType.workspace, workspace, member, MemberRole.member)

    result = await ListAccessRequestsUseCase(uow_factory()).execute(
        member.id, "workspace", workspace.id
    )

    assert result.error.code == ErrorCode.FORBIDDEN


@pytest.mark.asyncio
async def test_requester_sees_own_requests_including_link_ones(seed, uow_factory):
    owner = await seed.user("owner@acme.com")
    workspace = await seed.workspace()
    space = await seed.space(workspace)
    await seed.grant(EntityType.workspace, workspace, owner, MemberRole.owner)
    link = await CreateLinkSettingsUseCase(uow_factory()).execute(
        owner.id, "workspace", workspace.id, "guest", requires_approval=True
    )
    await UseInvitationLinkUseCase(uow_factory()).execute(link.value.link_token, "late@example.com")

    late = await seed.user("late@example.com")
    direct = await CreateAccessRequestUseCase(uow_factory()).execute(late.id, "space", space.id)
    denied = await ProcessAccessRequestUseCase(uow_factory()).execute(
        UUID(direct.value.request_id), owner.id, "denied"
    )

    everything = await ListMyAccessRequestsUseCase(uow_factory()).execute(late.id)
    pending = await ListMyAccessRequestsUseCase(uow_factory()).execute(late.id, status="pending")
    others = await ListMyAccessRequestsUseCase(uow_factory()).execute(owner.id)

    assert denied.is_ok()
    assert {r.target_type for r in everything.value.requests} == {"workspace", "space"}
    assert [r.target_type for r in pending.value.requests] == ["workspace"]
    assert others.value.requests == []
