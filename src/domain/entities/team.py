"""
Team Entity

Named group of users inside a workspace. Teams are referenced by the
allowed_teams lists of restricted entities.
"""

from uuid import UUID

from sqlmodel import Field

from .access_control import AccessControlled


class Team(AccessControlled, table=True):
    __tablename__ = "teams"

    workspace_id: UUID = Field(foreign_key="workspaces.id", nullable=False, index=True)
