"""
Access Query DTOs (Data Transfer Objects)

Read-only views over the effective-access resolver.
"""

from typing import List, Optional

from pydantic import BaseModel


class EntityRefResponse(BaseModel):
    type: str
    id: str


class AccessLevelResponse(BaseModel):
    """Effective role and its origin; origin is None for direct access"""

    role: str
    origin: Optional[EntityRefResponse] = None
    is_inherited: bool
    via_allow_list: bool = False


class HasAccessResponse(BaseModel):
    has_access: bool


class AccessInfoResponse(BaseModel):
    entity: EntityRefResponse
    user_id: str
    has_access: bool
    role: Optional[str] = None
    origin: Optional[EntityRefResponse] = None
    is_inherited: bool = False
    via_allow_list: bool = False
    permission: Optional[str] = None
    can_manage: bool = False


class MemberInfo(BaseModel):
    user_id: str
    role: str
    is_inherited: bool
    inherited_from: Optional[EntityRefResponse] = None
    via_allow_list: bool = False


class MemberListResponse(BaseModel):
    entity: EntityRefResponse
    members: List[MemberInfo]


class AccessibleEntityInfo(BaseModel):
    type: str
    id: str
    name: str
    role: str
    origin: Optional[EntityRefResponse] = None
    via_allow_list: bool = False


class AccessibleEntitiesResponse(BaseModel):
    items: List[AccessibleEntityInfo]


class ParentChainResponse(BaseModel):
    chain: List[EntityRefResponse]


class PermissionCheckResponse(BaseModel):
    entity: EntityRefResponse
    action: str
    allowed: bool
