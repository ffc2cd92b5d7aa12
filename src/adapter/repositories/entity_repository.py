from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import String, cast, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.field_update import FieldUpdate, SetTo, apply_update
from src.app.repositories.entity_repository import IEntityRepository
from src.domain.access import EntityNode, EntityRef
from src.domain.entities import (
    ENTITY_MODELS,
    AccessControlled,
    EntityType,
    Folder,
    Project,
    Space,
    Task,
    Team,
    Visibility,
    Workspace,
)


def _parent_ref(entity_type: EntityType, row: AccessControlled) -> Optional[EntityRef]:
    if entity_type == EntityType.space:
        return EntityRef(type=EntityType.workspace, id=row.workspace_id)
    if entity_type == EntityType.folder:
        return EntityRef(type=EntityType.space, id=row.space_id)
    if entity_type == EntityType.project:
        if row.folder_id is not None:
            return EntityRef(type=EntityType.folder, id=row.folder_id)
        return EntityRef(type=EntityType.space, id=row.space_id)
    if entity_type == EntityType.task:
        return EntityRef(type=EntityType.project, id=row.project_id)
    if entity_type == EntityType.team:
        return EntityRef(type=EntityType.workspace, id=row.workspace_id)
    return None


def to_node(entity_type: EntityType, row: AccessControlled) -> EntityNode:
    return EntityNode(
        type=entity_type,
        id=row.id,
        name=row.name,
        parent=_parent_ref(entity_type, row),
        visibility=row.visibility,
        allowed_users=frozenset(UUID(str(u)) for u in row.allowed_users or []),
        allowed_teams=frozenset(UUID(str(t)) for t in row.allowed_teams or []),
        created_by_id=getattr(row, "created_by_id", None),
    )


class EntityRepository(IEntityRepository):
    """Entity store implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _children_filter(self, child_type: EntityType, parent_type: EntityType, parent_ids):
        if (child_type, parent_type) == (EntityType.space, EntityType.workspace):
            return [Space.workspace_id.in_(parent_ids)]
        if (child_type, parent_type) == (EntityType.folder, EntityType.space):
            return [Folder.space_id.in_(parent_ids)]
        if (child_type, parent_type) == (EntityType.project, EntityType.space):
            return [Project.space_id.in_(parent_ids), Project.folder_id.is_(None)]
        if (child_type, parent_type) == (EntityType.project, EntityType.folder):
            return [Project.folder_id.in_(parent_ids)]
        if (child_type, parent_type) == (EntityType.task, EntityType.project):
            return [Task.project_id.in_(parent_ids)]
        if (child_type, parent_type) == (EntityType.team, EntityType.workspace):
            return [Team.workspace_id.in_(parent_ids)]
        raise ValueError(f"{parent_type.value} cannot contain {child_type.value}")

    async def get(self, entity_type: EntityType, entity_id: UUID) -> Optional[EntityNode]:
        model = ENTITY_MODELS[entity_type]
        stmt = select(model).where(model.id == entity_id)
        result = await self.session.execute(stmt)
        row = result.scalar_one_or_none()
        return to_node(entity_type, row) if row is not None else None

    async def get_many(
        self, entity_type: EntityType, entity_ids: Iterable[UUID]
    ) -> List[EntityNode]:
        ids = list(set(entity_ids))
        if not ids:
            return []
        model = ENTITY_MODELS[entity_type]
        stmt = select(model).where(model.id.in_(ids))
        result = await self.session.execute(stmt)
        return [to_node(entity_type, row) for row in result.scalars().all()]

    async def list_children(
        self, child_type: EntityType, parent_type: EntityType, parent_ids: Iterable[UUID]
    ) -> List[EntityNode]:
        ids = list(set(parent_ids))
        if not ids:
            return []
        model = ENTITY_MODELS[child_type]
        stmt = select(model).where(*self._children_filter(child_type, parent_type, ids))
        result = await self.session.execute(stmt)
        return [to_node(child_type, row) for row in result.scalars().all()]

    async def list_allow_listed(
        self, entity_type: EntityType, user_id: UUID, team_ids: Iterable[UUID]
    ) -> List[EntityNode]:
        model = ENTITY_MODELS[entity_type]
        teams = frozenset(team_ids)
        # Textual prefilter on the JSON columns; exact match happens in admits()
        conditions = [cast(model.allowed_users, String).like(f"%{user_id}%")]
        conditions.extend(cast(model.allowed_teams, String).like(f"%{t}%") for t in teams)
        stmt = select(model).where(or_(*conditions))
        result = await self.session.execute(stmt)
        nodes = [to_node(entity_type, row) for row in result.scalars().all()]
        return [node for node in nodes if node.admits(user_id, teams)]

    async def lock_workspace(self, workspace_id: UUID) -> bool:
        # No-op write: row lock on PostgreSQL, database write lock on SQLite
        stmt = (
            update(Workspace)
            .where(Workspace.id == workspace_id)
            .values(id=Workspace.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def update_access_control(
        self,
        entity_type: EntityType,
        entity_id: UUID,
        visibility: FieldUpdate,
        allowed_users: FieldUpdate,
        allowed_teams: FieldUpdate,
    ) -> Optional[EntityNode]:
        model = ENTITY_MODELS[entity_type]
        stmt = select(model).where(model.id == entity_id).with_for_update()
        result = await self.session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            return None

        # Clearing a column restores its default
        row.visibility = apply_update(row.visibility, visibility) or Visibility.public
        # JSON columns are replaced wholesale so the change is tracked
        if isinstance(allowed_users, SetTo):
            allowed_users = SetTo([str(u) for u in allowed_users.value])
        if isinstance(allowed_teams, SetTo):
            allowed_teams = SetTo([str(t) for t in allowed_teams.value])
        row.allowed_users = apply_update(row.allowed_users, allowed_users) or []
        row.allowed_teams = apply_update(row.allowed_teams, allowed_teams) or []

        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return to_node(entity_type, row)
