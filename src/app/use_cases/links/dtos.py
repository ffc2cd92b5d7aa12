"""
Invitation Link DTOs (Data Transfer Objects)
"""

from typing import List, Optional

from pydantic import BaseModel


class LinkSettingsResponse(BaseModel):
    """Response for create / deactivate link settings"""

    settings_id: str
    link_token: str
    link_url: str
    target_type: str
    target_id: str
    default_role: str
    default_permission: str
    is_active: bool
    requires_approval: bool
    allowed_domains: List[str]
    blocked_domains: List[str]
    max_uses: Optional[int] = None
    use_count: int
    expires_at: Optional[str] = None


class LinkRedemptionResponse(BaseModel):
    """
    Outcome of redeeming a link.

    kind is "invitation" (token holds the fresh invitation token) or
    "access_request" when the link requires approval.
    """

    kind: str
    status: str
    target_type: str
    target_id: str
    role: str
    invitation_id: Optional[str] = None
    token: Optional[str] = None
    access_request_id: Optional[str] = None
