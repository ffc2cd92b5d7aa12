"""
Member Use Case DTOs (Data Transfer Objects)

Response classes for direct membership management.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel


class MemberResponse(BaseModel):
    """Direct membership after add / role change"""

    membership_id: str
    entity_type: str
    entity_id: str
    user_id: str
    role: str


class RemoveMemberResponse(BaseModel):
    """Response for remove member use case"""

    status: str


class EntityAccessControlResponse(BaseModel):
    """Access-control columns of an entity after an update"""

    entity_type: str
    entity_id: str
    visibility: str
    allowed_users: List[str]
    allowed_teams: List[str]
    parent_type: Optional[str] = None
    parent_id: Optional[str] = None


class UserMembershipsResponse(BaseModel):
    """Direct memberships of one user keyed by entity type"""

    user_id: str
    memberships: Dict[str, List[MemberResponse]]
