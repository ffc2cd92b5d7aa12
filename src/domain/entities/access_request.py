"""
AccessRequest Entity

User-initiated request to join an entity, approved or denied by a manager.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import AccessRequestStatus, EntityType, MemberRole


class AccessRequest(SQLModel, table=True):
    """
    AccessRequest entity - pending until processed once.

    Business Rules:
    - One pending request per (requester, target)
    - requester_id is empty when an approval-gated link is redeemed by an
      address that has no account yet
    - Approval creates the membership in the same transaction
    """

    __tablename__ = "access_requests"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    workspace_id: UUID = Field(foreign_key="workspaces.id", nullable=False, index=True)
    requester_id: Optional[UUID] = Field(default=None, index=True)
    email: str = Field(max_length=255, nullable=False)

    target_type: EntityType = Field(nullable=False)
    target_id: UUID = Field(nullable=False)

    message: Optional[str] = Field(default=None, max_length=2000)
    requested_role: Optional[MemberRole] = Field(default=None)

    status: AccessRequestStatus = Field(default=AccessRequestStatus.pending)
    processed_by_id: Optional[UUID] = Field(default=None)
    processed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    denial_reason: Optional[str] = Field(default=None, max_length=1000)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_access_request_target_status", "target_type", "target_id", "status"),
    )
