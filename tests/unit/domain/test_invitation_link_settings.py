from datetime import datetime, timedelta
from uuid import uuid4

from src.domain.entities import (
    EntityType,
    InvitationLinkSettings,
    MemberRole,
    PermissionLevel,
    email_domain,
)


def make_settings(**overrides):
    values = dict(
        workspace_id=uuid4(),
        link_token="link-token",
        target_type=EntityType.workspace,
        target_id=uuid4(),
        default_role=MemberRole.member,
        default_permission=PermissionLevel.edit,
        created_by_id=uuid4(),
    )
    values.update(overrides)
    return InvitationLinkSettings(**values)


def test_email_domain():
    assert email_domain("Jane@Example.COM") == "example.com"
    assert email_domain("not-an-email") is None
    assert email_domain("@example.com") is None


def test_empty_allow_list_admits_every_domain():
    settings = make_settings()
    assert settings.check_domain("a@anything.io")


def test_blocked_domain_wins_over_allowed():
    settings = make_settings(allowed_domains=["acme.com"], blocked_domains=["ACME.com"])
    assert not settings.check_domain("a@acme.com")


def test_allow_list_restricts_domains():
    settings = make_settings(allowed_domains=["acme.com"])
    assert settings.check_domain("a@acme.com")
    assert not settings.check_domain("a@other.com")


def test_quota_and_expiry():
    now = datetime(2026, 1, 1)
    settings = make_settings(max_uses=2, use_count=1, expires_at=now + timedelta(days=1))
    assert settings.is_valid(now)

    settings.use_count = 2
    assert settings.is_exhausted()
    assert not settings.is_valid(now)

    unlimited = make_settings(max_uses=None, use_count=1000)
    assert not unlimited.is_exhausted()

    assert make_settings(expires_at=now).is_expired(now)
    assert not make_settings(is_active=False).is_valid(now)
