"""
Access Engine Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

from typing import Dict, Type

# Export all enums
from .enums import (
    AccessRequestStatus,
    EntityType,
    InvitationAction,
    InvitationMethod,
    InvitationStatus,
    MemberRole,
    PermissionAction,
    PermissionLevel,
    Visibility,
)

# Export all entities
from .access_control import AccessControlled
from .workspace import Workspace
from .space import Space
from .folder import Folder
from .project import Project
from .task import Task
from .team import Team
from .user import User
from .membership import (
    MEMBER_MODELS,
    FolderMember,
    MemberBase,
    ProjectMember,
    SpaceMember,
    TaskMember,
    TeamMember,
    WorkspaceMember,
)
from .invitation import Invitation, InvitationStats
from .invitation_permissions import CAPABILITIES, InvitationPermissions
from .invitation_activity import InvitationActivity
from .invitation_link import InvitationLinkSettings, email_domain
from .access_request import AccessRequest

ENTITY_MODELS: Dict[EntityType, Type[AccessControlled]] = {
    EntityType.workspace: Workspace,
    EntityType.space: Space,
    EntityType.folder: Folder,
    EntityType.project: Project,
    EntityType.task: Task,
    EntityType.team: Team,
}

__all__ = [
    # Enums
    "AccessRequestStatus",
    "EntityType",
    "InvitationAction",
    "InvitationMethod",
    "InvitationStatus",
    "MemberRole",
    "PermissionAction",
    "PermissionLevel",
    "Visibility",
    # Hierarchy
    "AccessControlled",
    "Workspace",
    "Space",
    "Folder",
    "Project",
    "Task",
    "Team",
    "ENTITY_MODELS",
    # Identity and membership
    "User",
    "MemberBase",
    "WorkspaceMember",
    "SpaceMember",
    "FolderMember",
    "ProjectMember",
    "TaskMember",
    "TeamMember",
    "MEMBER_MODELS",
    # Invitations
    "Invitation",
    "InvitationStats",
    "InvitationPermissions",
    "CAPABILITIES",
    "InvitationActivity",
    "InvitationLinkSettings",
    "email_domain",
    "AccessRequest",
]
