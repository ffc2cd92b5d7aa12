"""
InvitationPermissions Entity

Fine-grained capability overrides attached to one invitation.
"""

from typing import Dict, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, Field, SQLModel

from .enums import PermissionLevel

CAPABILITIES = (
    "can_edit_tasks",
    "can_create_tasks",
    "can_delete_tasks",
    "can_comment",
    "can_create_subtasks",
    "can_assign_tasks",
    "can_see_time_spent",
    "can_track_time",
    "can_add_tags",
    "can_create_views",
    "can_invite_others",
    "can_manage_sprints",
    "can_view_reports",
    "can_export",
)

_GRANTED_BY_LEVEL = {
    PermissionLevel.full_edit: set(CAPABILITIES),
    PermissionLevel.edit: {
        "can_edit_tasks",
        "can_create_tasks",
        "can_comment",
        "can_create_subtasks",
        "can_assign_tasks",
        "can_see_time_spent",
        "can_track_time",
        "can_add_tags",
        "can_create_views",
        "can_view_reports",
    },
    PermissionLevel.comment: {"can_comment", "can_see_time_spent"},
    PermissionLevel.view_only: set(),
}


class InvitationPermissions(SQLModel, table=True):
    """
    InvitationPermissions entity - optional per-invitation capability set.

    Business Rules:
    - At most one row per invitation
    - When present it replaces the capabilities implied by the coarse level
    """

    __tablename__ = "invitation_permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    invitation_id: UUID = Field(foreign_key="invitations.id", unique=True, index=True)

    can_edit_tasks: bool = Field(default=False)
    can_create_tasks: bool = Field(default=False)
    can_delete_tasks: bool = Field(default=False)
    can_comment: bool = Field(default=False)
    can_create_subtasks: bool = Field(default=False)
    can_assign_tasks: bool = Field(default=False)
    can_see_time_spent: bool = Field(default=False)
    can_track_time: bool = Field(default=False)
    can_add_tags: bool = Field(default=False)
    can_create_views: bool = Field(default=False)
    can_invite_others: bool = Field(default=False)
    can_manage_sprints: bool = Field(default=False)
    can_view_reports: bool = Field(default=False)
    can_export: bool = Field(default=False)

    custom_permissions: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    @classmethod
    def for_level(cls, invitation_id: UUID, level: PermissionLevel) -> "InvitationPermissions":
        granted = _GRANTED_BY_LEVEL[level]
        return cls(
            invitation_id=invitation_id,
            **{name: name in granted for name in CAPABILITIES},
        )

    def as_dict(self) -> Dict[str, bool]:
        return {name: getattr(self, name) for name in CAPABILITIES}
