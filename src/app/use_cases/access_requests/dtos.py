"""
Access Request DTOs (Data Transfer Objects)
"""

from typing import List, Optional

from pydantic import BaseModel


class AccessRequestResponse(BaseModel):
    request_id: str
    status: str
    target_type: str
    target_id: str
    email: str
    requester_id: Optional[str] = None
    requested_role: Optional[str] = None
    message: Optional[str] = None
    processed_by_id: Optional[str] = None
    processed_at: Optional[str] = None
    denial_reason: Optional[str] = None
    created_at: str


class ProcessAccessRequestResponse(BaseModel):
    request_id: str
    status: str
    membership_id: Optional[str] = None
    role: Optional[str] = None


class AccessRequestListResponse(BaseModel):
    requests: List[AccessRequestResponse]
