"""
Space Entity
"""

from uuid import UUID

from sqlmodel import Field

from .access_control import AccessControlled


class Space(AccessControlled, table=True):
    """
    Space entity - child of a Workspace.

    Business Rules:
    - Workspace members inherit their role here unless the space is
      restricted and does not list them
    """

    __tablename__ = "spaces"

    workspace_id: UUID = Field(foreign_key="workspaces.id", nullable=False, index=True)
