"""
Task Entity
"""

from uuid import UUID

from sqlmodel import Field

from .access_control import AccessControlled


class Task(AccessControlled, table=True):
    """Task entity - leaf of the hierarchy, child of a Project."""

    __tablename__ = "tasks"

    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)
