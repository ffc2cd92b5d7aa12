"""
Invitation Entity

Single-use token invitations to join a workspace, space, folder, project,
task or team.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import (
    EntityType,
    InvitationMethod,
    InvitationStatus,
    MemberRole,
    PermissionLevel,
)


class Invitation(SQLModel, table=True):
    """
    Invitation entity - offer of a role on one target entity.

    Business Rules:
    - Created by a manager of the target, never for a role above their own
    - Expires after INVITATION_EXPIRY_DAYS (7 by default)
    - Token is single-use, URL-safe, 256 bits from the OS CSPRNG
    - Cannot invite existing members or duplicate a pending invitation
    - Status leaves pending exactly once (conditional update)
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    workspace_id: UUID = Field(foreign_key="workspaces.id", nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False, index=True)

    target_type: EntityType = Field(nullable=False)
    target_id: UUID = Field(nullable=False)

    role: MemberRole = Field(nullable=False)
    permission: PermissionLevel = Field(nullable=False)

    token: str = Field(unique=True, index=True, max_length=128)
    link_token: Optional[str] = Field(default=None, max_length=128)

    invited_by_id: Optional[UUID] = Field(default=None, index=True)
    invitee_user_id: Optional[UUID] = Field(default=None)

    status: InvitationStatus = Field(default=InvitationStatus.pending)
    method: InvitationMethod = Field(default=InvitationMethod.email)
    message: Optional[str] = Field(default=None, max_length=2000)

    # Link-minted invitations: quota of the link and which use this was
    max_uses: Optional[int] = Field(default=None)
    use_count: Optional[int] = Field(default=None)

    reminder_count: int = Field(default=0)
    reminder_sent_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    declined_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_invitation_expires_at", "expires_at"),
        Index("idx_invitation_target_email", "target_type", "target_id", "email"),
        Index("idx_invitation_status", "status"),
    )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


class InvitationStats(SQLModel):
    """
    Invitation outcomes over a workspace or a single target.

    acceptance_rate is a percentage of the answered invitations (accepted or
    declined); avg_hours_to_accept is 0 when nothing was accepted.
    """

    total: int = 0
    pending: int = 0
    accepted: int = 0
    declined: int = 0
    expired: int = 0
    cancelled: int = 0
    revoked: int = 0
    acceptance_rate: float = 0.0
    avg_hours_to_accept: float = 0.0

    @classmethod
    def from_counts(cls, counts, accept_hours) -> "InvitationStats":
        accepted = counts.get(InvitationStatus.accepted, 0)
        declined = counts.get(InvitationStatus.declined, 0)
        answered = accepted + declined
        return cls(
            total=sum(counts.values()),
            pending=counts.get(InvitationStatus.pending, 0),
            accepted=accepted,
            declined=declined,
            expired=counts.get(InvitationStatus.expired, 0),
            cancelled=counts.get(InvitationStatus.cancelled, 0),
            revoked=counts.get(InvitationStatus.revoked, 0),
            acceptance_rate=accepted / answered * 100 if answered else 0.0,
            avg_hours_to_accept=sum(accept_hours) / len(accept_hours) if accept_hours else 0.0,
        )
