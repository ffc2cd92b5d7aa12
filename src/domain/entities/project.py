"""
Project Entity

Also called a "list" in some clients.
"""

from typing import Optional
from uuid import UUID

from sqlmodel import Field

from .access_control import AccessControlled


class Project(AccessControlled, table=True):
    """
    Project entity - lives in a Space, optionally inside a Folder.

    Business Rules:
    - Parent is the folder when folder_id is set, else the space
    - folder_id, when set, must point at a folder of the same space
    - Project leads may manage members and invitations of the project
    """

    __tablename__ = "projects"

    space_id: UUID = Field(foreign_key="spaces.id", nullable=False, index=True)
    folder_id: Optional[UUID] = Field(default=None, foreign_key="folders.id", index=True)
