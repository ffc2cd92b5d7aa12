import asyncio
from uuid import UUID

import pytest
from sqlmodel import select

from src.app.use_cases.invitations import AcceptInvitationUseCase
from src.app.use_cases.links import (
    CreateLinkSettingsUseCase,
    DeactivateLinkSettingsUseCase,
    UseInvitationLinkUseCase,
)
from src.domain.entities import EntityType, Invitation, InvitationLinkSettings, MemberRole
from src.domain.errors import ErrorCode


async def create_link(seed, uow_factory, **options):
    owner = await seed.user("owner@acme.com")
    workspace = await seed.workspace()
    await seed.grant(EntityType.workspace, workspace, owner, MemberRole.owner)
    result = await CreateLinkSettingsUseCase(uow_factory()).execute(
        owner.id, "workspace", workspace.id, "member", **options
    )
    assert result.is_ok()
    return owner, workspace, result.value


@pytest.mark.asyncio
async def test_link_quota_holds_under_concurrency(seed, uow_factory, db_session):
    """max_uses=2 with three concurrent redemptions: two invitations, one CONFLICT"""
    _, _, link = await create_link(seed, uow_factory, max_uses=2)
    emails = ["a@example.com", "b@example.com", "c@example.com"]

    results = await asyncio.gather(
        *(UseInvitationLinkUseCase(uow_factory()).execute(link.link_token, e) for e in emails)
    )

    succeeded = [r for r in results if r.is_ok()]
    failed = [r for r in results if r.is_err()]
    assert len(succeeded) == 2
    assert len(failed) == 1
    assert failed[0].error.code == ErrorCode.CONFLICT

    settings = (
        await db_session.execute(
            select(InvitationLinkSettings).where(
                InvitationLinkSettings.id == UUID(link.settings_id)
            )
        )
    ).scalar_one()
    assert settings.use_count == 2

    minted = (
        await db_session.execute(select(Invitation).where(Invitation.link_token == link.link_token))
    ).scalars().all()
    assert len(minted) == 2


@pytest.mark.asyncio
async def test_link_invitation_can_be_accepted(seed, uow_factory):
    _, workspace, link = await create_link(seed, uow_factory)
    joiner = await seed.user("joiner@example.com")

    redeemed = await UseInvitationLinkUseCase(uow_factory()).execute(
        link.link_token, "Joiner@Example.com"
    )
    accepted = await AcceptInvitationUseCase(uow_factory()).execute(redeemed.value.token, joiner.id)
    again = await UseInvitationLinkUseCase(uow_factory()).execute(link.link_token, "joiner@example.com")

    assert redeemed.value.kind == "invitation"
    assert accepted.is_ok()
    assert accepted.value.target_id == str(workspace.id)
    assert again.error.code == ErrorCode.CONFLICT


@pytest.mark.asyncio
async def test_domain_rules(seed, uow_factory):
    _, _, link = await create_link(
        seed, uow_factory, allowed_domains=["acme.com", "partner.io"], blocked_domains=["partner.io"]
    )

    allowed = await UseInvitationLinkUseCase(uow_factory()).execute(link.link_token, "x@acme.com")
    blocked = await UseInvitationLinkUseCase(uow_factory()).execute(link.link_token, "x@partner.io")
    outside = await UseInvitationLinkUseCase(uow_factory()).execute(link.link_token, "x@gmail.com")

    assert allowed.is_ok()
    assert blocked.error.code == ErrorCode.FORBIDDEN
    assert outside.error.code == ErrorCode.FORBIDDEN


@pytest.mark.asyncio
async def test_new_link_supersedes_old_one(seed, uow_factory):
    owner, workspace, first = await create_link(seed, uow_factory)

    second = await CreateLinkSettingsUseCase(uow_factory()).execute(
        owner.id, "workspace", workspace.id, "guest"
    )
    old = await UseInvitationLinkUseCase(uow_factory()).execute(first.link_token, "a@example.com")
    new = await UseInvitationLinkUseCase(uow_factory()).execute(
        second.value.link_token, "a@example.com"
    )

    assert old.error.code == ErrorCode.INVALID_TOKEN
    assert new.value.role == "guest"


@pytest.mark.asyncio
async def test_deactivated_link_stops_working(seed, uow_factory):
    owner, _, link = await create_link(seed, uow_factory)

    deactivated = await DeactivateLinkSettingsUseCase(uow_factory()).execute(
        owner.id, UUID(link.settings_id)
    )
    result = await UseInvitationLinkUseCase(uow_factory()).execute(link.link_token, "a@example.com")

    assert deactivated.value.is_active is False
    assert result.error.code == ErrorCode.INVALID_TOKEN
