"""
InvitationLinkSettings Entity

Shareable, optionally usage-limited invitation link for one target.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import EntityType, MemberRole, PermissionLevel


def email_domain(email: str) -> Optional[str]:
    local, sep, domain = email.strip().rpartition("@")
    if not sep or not local or not domain:
        return None
    return domain.lower()


class InvitationLinkSettings(SQLModel, table=True):
    """
    InvitationLinkSettings entity - a redeemable link.

    Business Rules:
    - At most one active link per (workspace, target_type, target_id)
    - use_count never exceeds max_uses (atomic conditional increment)
    - blocked_domains wins over allowed_domains; an empty allow list admits all
    - requires_approval turns redemptions into access requests
    """

    __tablename__ = "invitation_link_settings"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    workspace_id: UUID = Field(foreign_key="workspaces.id", nullable=False, index=True)
    link_token: str = Field(unique=True, index=True, max_length=128)

    target_type: EntityType = Field(nullable=False)
    target_id: UUID = Field(nullable=False)

    default_role: MemberRole = Field(nullable=False)
    default_permission: PermissionLevel = Field(nullable=False)

    is_active: bool = Field(default=True)
    requires_approval: bool = Field(default=False)

    allowed_domains: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    blocked_domains: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    max_uses: Optional[int] = Field(default=None)
    use_count: int = Field(default=0)

    created_by_id: UUID = Field(nullable=False)

    # Timestamps
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_link_settings_target", "workspace_id", "target_type", "target_id"),
    )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def is_exhausted(self) -> bool:
        return self.max_uses is not None and self.use_count >= self.max_uses

    def is_valid(self, now: datetime) -> bool:
        return self.is_active and not self.is_expired(now) and not self.is_exhausted()

    def check_domain(self, email: str) -> bool:
        domain = email_domain(email)
        if domain is None:
            return False
        if domain in {d.lower() for d in self.blocked_domains or []}:
            return False
        if self.allowed_domains:
            return domain in {d.lower() for d in self.allowed_domains}
        return True
