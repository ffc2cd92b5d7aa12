"""
InvitationActivity Entity

Immutable log of everything that happens to an invitation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import InvitationAction


class InvitationActivity(SQLModel, table=True):
    """
    InvitationActivity entity - one row per invitation event.

    Business Rules:
    - Immutable (never updated or deleted)
    - actor_id nullable for system transitions (expiry) and anonymous link use
    - details stores additional context (old status, reminder count, ...)
    """

    __tablename__ = "invitation_activities"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    invitation_id: UUID = Field(foreign_key="invitations.id", nullable=False, index=True)
    actor_id: Optional[UUID] = Field(default=None, index=True)

    action: InvitationAction = Field(nullable=False)
    details: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_invitation_activity_created_at", "created_at"),
    )
