"""
Access value objects

Read-side views produced by the hierarchy and effective-access resolvers.
They are plain pydantic models, detached from the ORM session.
"""

from typing import FrozenSet, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.domain.entities.enums import EntityType, MemberRole, PermissionLevel, Visibility


class EntityRef(BaseModel):
    """(type, id) pair identifying one entity."""

    model_config = ConfigDict(frozen=True)

    type: EntityType
    id: UUID

    def __str__(self) -> str:
        return f"{self.type.value}:{self.id}"


class EntityNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: EntityType
    id: UUID
    name: str
    parent: Optional[EntityRef] = None
    visibility: Visibility = Visibility.public
    allowed_users: FrozenSet[UUID] = frozenset()
    allowed_teams: FrozenSet[UUID] = frozenset()
    # workspaces only
    created_by_id: Optional[UUID] = None

    @property
    def ref(self) -> EntityRef:
        return EntityRef(type=self.type, id=self.id)

    @property
    def is_restricted(self) -> bool:
        return self.visibility == Visibility.restricted

    @property
    def has_allow_list(self) -> bool:
        return bool(self.allowed_users or self.allowed_teams)

    def admits(self, user_id: UUID, team_ids: FrozenSet[UUID] = frozenset()) -> bool:
        """True when the allow-lists name the user or one of the user's teams."""
        if user_id in self.allowed_users:
            return True
        return not self.allowed_teams.isdisjoint(team_ids)


class AccessLevel(BaseModel):
    """
    Effective role of a user on an entity and where it came from.

    origin is None for a direct membership and for an allow-list grant;
    otherwise it names the ancestor holding the membership.
    """

    model_config = ConfigDict(frozen=True)

    role: MemberRole
    origin: Optional[EntityRef] = None
    via_allow_list: bool = False

    @property
    def is_inherited(self) -> bool:
        return self.origin is not None


class AccessInfo(BaseModel):
    entity: EntityRef
    user_id: UUID
    has_access: bool
    role: Optional[MemberRole] = None
    origin: Optional[EntityRef] = None
    is_inherited: bool = False
    via_allow_list: bool = False
    permission: Optional[PermissionLevel] = None
    can_manage: bool = False


class EffectiveMember(BaseModel):
    user_id: UUID
    role: MemberRole
    is_inherited: bool = False
    inherited_from: Optional[EntityRef] = None
    via_allow_list: bool = False


class AccessibleEntity(BaseModel):
    entity: EntityNode
    access: AccessLevel
