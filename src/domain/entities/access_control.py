"""
Access-control columns shared by every hierarchy entity.

The mixin is a plain SQLModel (no table); each table class gets its own copy
of the columns.
"""

from datetime import datetime
from typing import List
from uuid import UUID, uuid4

from sqlmodel import JSON, DateTime, Field, SQLModel

from src.domain.base import utc_now

from .enums import Visibility


class AccessControlled(SQLModel):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)

    visibility: Visibility = Field(default=Visibility.public)
    # UUIDs stored as strings
    allowed_users: List[str] = Field(default_factory=list, sa_type=JSON)
    allowed_teams: List[str] = Field(default_factory=list, sa_type=JSON)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
