"""
Folder Entity
"""

from uuid import UUID

from sqlmodel import Field

from .access_control import AccessControlled


class Folder(AccessControlled, table=True):
    """Folder entity - child of a Space, optional parent of Projects."""

    __tablename__ = "folders"

    space_id: UUID = Field(foreign_key="spaces.id", nullable=False, index=True)
