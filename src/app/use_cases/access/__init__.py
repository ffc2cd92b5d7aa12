"""
Access Query Use Cases

Effective access decisions, member listings and reverse queries.
"""

from .check_permission_use_case import CheckPermissionUseCase
from .dtos import (
    AccessibleEntitiesResponse,
    AccessibleEntityInfo,
    AccessInfoResponse,
    AccessLevelResponse,
    EntityRefResponse,
    HasAccessResponse,
    MemberInfo,
    MemberListResponse,
    ParentChainResponse,
    PermissionCheckResponse,
)
from .get_access_level_use_case import (
    GetAccessInfoUseCase,
    GetAccessLevelUseCase,
    HasEffectiveAccessUseCase,
)
from .get_accessible_entities_use_case import GetAccessibleEntitiesUseCase
from .get_parent_chain_use_case import GetParentChainUseCase
from .list_members_use_case import ListMembersUseCase

__all__ = [
    "GetAccessLevelUseCase",
    "HasEffectiveAccessUseCase",
    "GetAccessInfoUseCase",
    "ListMembersUseCase",
    "GetAccessibleEntitiesUseCase",
    "GetParentChainUseCase",
    "CheckPermissionUseCase",
    "AccessLevelResponse",
    "HasAccessResponse",
    "AccessInfoResponse",
    "MemberInfo",
    "MemberListResponse",
    "AccessibleEntityInfo",
    "AccessibleEntitiesResponse",
    "EntityRefResponse",
    "ParentChainResponse",
    "PermissionCheckResponse",
]
