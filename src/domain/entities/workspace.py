"""
Workspace Entity

Root of the containment hierarchy.
"""

from typing import Optional
from uuid import UUID

from sqlmodel import Field

from .access_control import AccessControlled


class Workspace(AccessControlled, table=True):
    """
    Workspace entity - top of Workspace > Space > Folder > Project > Task.

    Business Rules:
    - Has no parent
    - Must always keep at least one owner member
    - The creator may bootstrap itself as owner while the workspace is empty
    """

    __tablename__ = "workspaces"

    created_by_id: Optional[UUID] = Field(default=None, index=True)
