"""
Membership Entities

Direct role grants, one table per entity type.
"""

from datetime import datetime
from typing import ClassVar, Dict, Optional, Type
from uuid import UUID, uuid4

from sqlmodel import DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import EntityType, MemberRole


class MemberBase(SQLModel):
    """
    Columns shared by every membership table.

    Business Rules:
    - (entity_id, user_id) is unique per table
    - Only direct grants are stored; inherited access is computed
    - Rows are hard-deleted on removal
    """

    entity_type: ClassVar[EntityType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    role: MemberRole = Field(nullable=False)
    added_by_id: Optional[UUID] = Field(default=None)
    joined_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class WorkspaceMember(MemberBase, table=True):
    __tablename__ = "workspace_members"
    entity_type: ClassVar[EntityType] = EntityType.workspace

    entity_id: UUID = Field(foreign_key="workspaces.id", nullable=False, index=True)

    __table_args__ = (
        Index("idx_workspace_member_entity_user", "entity_id", "user_id", unique=True),
        Index("idx_workspace_member_role", "entity_id", "role"),
    )


class SpaceMember(MemberBase, table=True):
    __tablename__ = "space_members"
    entity_type: ClassVar[EntityType] = EntityType.space

    entity_id: UUID = Field(foreign_key="spaces.id", nullable=False, index=True)

    __table_args__ = (
        Index("idx_space_member_entity_user", "entity_id", "user_id", unique=True),
    )


class FolderMember(MemberBase, table=True):
    __tablename__ = "folder_members"
    entity_type: ClassVar[EntityType] = EntityType.folder

    entity_id: UUID = Field(foreign_key="folders.id", nullable=False, index=True)

    __table_args__ = (
        Index("idx_folder_member_entity_user", "entity_id", "user_id", unique=True),
    )


class ProjectMember(MemberBase, table=True):
    __tablename__ = "project_members"
    entity_type: ClassVar[EntityType] = EntityType.project

    entity_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)

    __table_args__ = (
        Index("idx_project_member_entity_user", "entity_id", "user_id", unique=True),
    )


class TaskMember(MemberBase, table=True):
    __tablename__ = "task_members"
    entity_type: ClassVar[EntityType] = EntityType.task

    entity_id: UUID = Field(foreign_key="tasks.id", nullable=False, index=True)

    __table_args__ = (
        Index("idx_task_member_entity_user", "entity_id", "user_id", unique=True),
    )


class TeamMember(MemberBase, table=True):
    __tablename__ = "team_members"
    entity_type: ClassVar[EntityType] = EntityType.team

    entity_id: UUID = Field(foreign_key="teams.id", nullable=False, index=True)

    __table_args__ = (
        Index("idx_team_member_entity_user", "entity_id", "user_id", unique=True),
    )


MEMBER_MODELS: Dict[EntityType, Type[MemberBase]] = {
    model.entity_type: model
    for model in (
        WorkspaceMember,
        SpaceMember,
        FolderMember,
        ProjectMember,
        TaskMember,
        TeamMember,
    )
}
