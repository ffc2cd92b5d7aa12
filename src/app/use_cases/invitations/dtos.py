"""
Invitation Use Case DTOs (Data Transfer Objects)

All Response classes for the invitation engine.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel


class InvitationResponse(BaseModel):
    """Response for the create invitation use cases"""

    invite_id: str
    status: str
    target_type: str
    target_id: str
    email: str
    role: str
    permission: str
    token: str
    invite_url: str
    expires_at: Optional[str] = None


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use cases"""

    invite_id: str
    status: str
    membership_id: str
    target_type: str
    target_id: str
    role: str


class InvitationStatusResponse(BaseModel):
    """Response for decline / cancel / revoke"""

    invite_id: str
    status: str


class ResendInvitationResponse(BaseModel):
    """Response for resend and regenerate token use cases"""

    invite_id: str
    status: str
    token: str
    invite_url: str
    reminder_count: int
    expires_at: Optional[str] = None


class InvitationSummary(BaseModel):
    invite_id: str
    email: str
    target_type: str
    target_id: str
    role: str
    permission: str
    status: str
    method: str
    invited_by_id: Optional[str] = None
    reminder_count: int
    created_at: str
    expires_at: Optional[str] = None


class InvitationListResponse(BaseModel):
    invitations: List[InvitationSummary]


class InvitationActivityItem(BaseModel):
    action: str
    actor_id: Optional[str] = None
    details: Optional[dict] = None
    created_at: str


class InvitationDetailResponse(BaseModel):
    invitation: InvitationSummary
    capabilities: Dict[str, bool]
    activity: List[InvitationActivityItem]


class InvitationStatsResponse(BaseModel):
    """Invitation outcomes; scope is the workspace or the single target"""

    scope_type: str
    scope_id: str
    total: int
    pending: int
    accepted: int
    declined: int
    expired: int
    cancelled: int
    revoked: int
    acceptance_rate: float
    avg_hours_to_accept: float
