"""
Member Management Use Cases

Direct memberships, role changes and the visibility overlay.
"""

from .add_member_use_case import AddMemberUseCase
from .dtos import (
    EntityAccessControlResponse,
    MemberResponse,
    RemoveMemberResponse,
    UserMembershipsResponse,
)
from .list_user_memberships_use_case import ListUserMembershipsUseCase
from .remove_member_use_case import RemoveMemberUseCase
from .update_access_control_use_case import UpdateAccessControlUseCase
from .update_member_role_use_case import UpdateMemberRoleUseCase

__all__ = [
    "AddMemberUseCase",
    "RemoveMemberUseCase",
    "UpdateMemberRoleUseCase",
    "UpdateAccessControlUseCase",
    "ListUserMembershipsUseCase",
    "MemberResponse",
    "RemoveMemberResponse",
    "EntityAccessControlResponse",
    "UserMembershipsResponse",
]
