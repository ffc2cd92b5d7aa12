"""
Effective-Access Resolver

Answers "can user U act on entity E, at what role, and where did that role
come from" by combining direct memberships with the ancestor chain.

Decision for (E, U):
1. A direct membership on E always wins.
2. Otherwise the ancestors are walked outward. A membership on ancestor A
   is inherited when every restricted entity between E and A (E included,
   A excluded) lists U or one of U's teams. Owner and admin grants are not
   gated. A gated grant does not stop the walk.
3. Otherwise an allow-list on E naming U grants the member role. Such
   grants never cascade to descendants.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.repositories.entity_repository import IEntityRepository
from src.app.repositories.membership_repository import IMembershipRepository
from src.app.services.hierarchy_resolver import HierarchyResolver
from src.domain.access import (
    AccessibleEntity,
    AccessInfo,
    AccessLevel,
    EffectiveMember,
    EntityNode,
    EntityRef,
)
from src.domain.entities import EntityType, MemberRole, PermissionAction
from src.domain.errors import ErrorCode
from src.domain.roles import (
    BYPASS_ROLES,
    action_allowed,
    default_permission_for_role,
    is_manager_role,
)

logger = logging.getLogger(__name__)

# Role granted by an allow-list entry without any membership
ALLOW_LIST_ROLE = MemberRole.member

_CLOSURE_LEVELS = (
    EntityType.workspace,
    EntityType.space,
    EntityType.folder,
    EntityType.project,
)

_PARENT_TYPES: Dict[EntityType, Tuple[EntityType, ...]] = {
    EntityType.space: (EntityType.workspace,),
    EntityType.folder: (EntityType.space,),
    EntityType.project: (EntityType.space, EntityType.folder),
}


@dataclass(frozen=True)
class _Grant:
    """A membership that may still flow down to descendants."""

    origin: EntityRef
    role: MemberRole
    # every restricted entity crossed so far admits the user
    open: bool

    def passes(self) -> bool:
        return self.open or self.role in BYPASS_ROLES


class EffectiveAccessResolver:
    def __init__(
        self,
        entities: IEntityRepository,
        memberships: IMembershipRepository,
        hierarchy: Optional[HierarchyResolver] = None,
    ):
        self.entities = entities
        self.memberships = memberships
        self.hierarchy = hierarchy or HierarchyResolver(entities)

    async def _admits(
        self, node: EntityNode, user_id: UUID, teams: Dict[UUID, FrozenSet[UUID]]
    ) -> bool:
        if user_id in node.allowed_users:
            return True
        if not node.allowed_teams:
            return False
        if user_id not in teams:
            teams[user_id] = frozenset(await self.memberships.team_ids_for_user(user_id))
        return node.admits(user_id, teams[user_id])

    async def _crosses(
        self,
        role: MemberRole,
        gates: List[EntityNode],
        user_id: UUID,
        teams: Dict[UUID, FrozenSet[UUID]],
    ) -> bool:
        if role in BYPASS_ROLES:
            return True
        for gate in gates:
            if not await self._admits(gate, user_id, teams):
                return False
        return True

    # ------------------------------------------------------------------
    # Single decisions
    # ------------------------------------------------------------------

    async def access_level_for(self, node: EntityNode, user_id: UUID) -> Result[AccessLevel]:
        direct = await self.memberships.get(node.type, node.id, user_id)
        if direct is not None:
            return Return.ok(AccessLevel(role=direct.role))

        chain_result = await self.hierarchy.ancestors(node)
        if chain_result.is_err():
            return chain_result

        teams: Dict[UUID, FrozenSet[UUID]] = {}
        gates = [node] if node.is_restricted else []
        for ancestor in chain_result.value:
            grant = await self.memberships.get(ancestor.type, ancestor.id, user_id)
            if grant is not None and await self._crosses(grant.role, gates, user_id, teams):
                return Return.ok(AccessLevel(role=grant.role, origin=ancestor.ref))
            if ancestor.is_restricted:
                gates.append(ancestor)

        if node.has_allow_list and await self._admits(node, user_id, teams):
            return Return.ok(AccessLevel(role=ALLOW_LIST_ROLE, via_allow_list=True))

        return Return.err(
            Error(ErrorCode.UNAUTHORIZED, f"User {user_id} has no access to {node.ref}")
        )

    async def get_access_level(
        self, entity_type: EntityType, entity_id: UUID, user_id: UUID
    ) -> Result[AccessLevel]:
        node_result = await self.hierarchy.get_node(entity_type, entity_id)
        if node_result.is_err():
            return node_result
        return await self.access_level_for(node_result.value, user_id)

    async def has_effective_access(
        self, entity_type: EntityType, entity_id: UUID, user_id: UUID
    ) -> Result[bool]:
        level_result = await self.get_access_level(entity_type, entity_id, user_id)
        if level_result.is_ok():
            return Return.ok(True)
        if level_result.error.code == ErrorCode.UNAUTHORIZED:
            return Return.ok(False)
        return level_result

    async def check_permission(
        self,
        entity_type: EntityType,
        entity_id: UUID,
        user_id: UUID,
        action: PermissionAction,
    ) -> Result[bool]:
        """False when the user has no access; NOT_FOUND still propagates."""
        level_result = await self.get_access_level(entity_type, entity_id, user_id)
        if level_result.is_err():
            if level_result.error.code == ErrorCode.UNAUTHORIZED:
                return Return.ok(False)
            return level_result

        level = level_result.value
        return Return.ok(action_allowed(level.role, entity_type, action, level.via_allow_list))

    async def get_access_info(
        self, entity_type: EntityType, entity_id: UUID, user_id: UUID
    ) -> Result[AccessInfo]:
        level_result = await self.get_access_level(entity_type, entity_id, user_id)
        ref = EntityRef(type=entity_type, id=entity_id)
        if level_result.is_err():
            if level_result.error.code != ErrorCode.UNAUTHORIZED:
                return level_result
            return Return.ok(AccessInfo(entity=ref, user_id=user_id, has_access=False))

        level = level_result.value
        return Return.ok(
            AccessInfo(
                entity=ref,
                user_id=user_id,
                has_access=True,
                role=level.role,
                origin=level.origin,
                is_inherited=level.is_inherited,
                via_allow_list=level.via_allow_list,
                permission=default_permission_for_role(level.role),
                can_manage=not level.via_allow_list and is_manager_role(level.role, entity_type),
            )
        )

    async def require_manager(self, node: EntityNode, user_id: UUID) -> Result[AccessLevel]:
        """Actor must hold a managing role on the entity, directly or inherited."""
        level_result = await self.access_level_for(node, user_id)
        if level_result.is_err():
            return level_result

        level = level_result.value
        if level.via_allow_list or not is_manager_role(level.role, node.type):
            logger.warning(
                f"User {user_id} with role {level.role.value} cannot manage {node.ref}"
            )
            return Return.err(
                Error(
                    ErrorCode.FORBIDDEN,
                    f"Role {level.role.value} cannot manage this {node.type.value}",
                )
            )
        return Return.ok(level)

    # ------------------------------------------------------------------
    # Member listings
    # ------------------------------------------------------------------

    async def list_direct_members(
        self, entity_type: EntityType, entity_id: UUID
    ) -> Result[List[EffectiveMember]]:
        node_result = await self.hierarchy.get_node(entity_type, entity_id)
        if node_result.is_err():
            return node_result
        rows = await self.memberships.list_by_entity(entity_type, entity_id)
        return Return.ok([EffectiveMember(user_id=m.user_id, role=m.role) for m in rows])

    async def list_effective_members(
        self, entity_type: EntityType, entity_id: UUID
    ) -> Result[List[EffectiveMember]]:
        node_result = await self.hierarchy.get_node(entity_type, entity_id)
        if node_result.is_err():
            return node_result
        node = node_result.value

        chain_result = await self.hierarchy.ancestors(node)
        if chain_result.is_err():
            return chain_result

        members = [
            EffectiveMember(user_id=m.user_id, role=m.role)
            for m in await self.memberships.list_by_entity(node.type, node.id)
        ]
        seen = {m.user_id for m in members}

        teams: Dict[UUID, FrozenSet[UUID]] = {}
        gates = [node] if node.is_restricted else []
        for ancestor in chain_result.value:
            for grant in await self.memberships.list_by_entity(ancestor.type, ancestor.id):
                if grant.user_id in seen:
                    continue
                if await self._crosses(grant.role, gates, grant.user_id, teams):
                    seen.add(grant.user_id)
                    members.append(
                        EffectiveMember(
                            user_id=grant.user_id,
                            role=grant.role,
                            is_inherited=True,
                            inherited_from=ancestor.ref,
                        )
                    )
            if ancestor.is_restricted:
                gates.append(ancestor)

        allow_listed = set(node.allowed_users)
        for team_id in node.allowed_teams:
            for team_member in await self.memberships.list_by_entity(EntityType.team, team_id):
                allow_listed.add(team_member.user_id)
        for user_id in sorted(allow_listed - seen, key=str):
            members.append(
                EffectiveMember(user_id=user_id, role=ALLOW_LIST_ROLE, via_allow_list=True)
            )

        return Return.ok(members)

    # ------------------------------------------------------------------
    # Reverse queries
    # ------------------------------------------------------------------

    async def _accessible(
        self, user_id: UUID, target_type: EntityType
    ) -> Result[List[AccessibleEntity]]:
        """
        Downward closure computed level by level from the workspaces.

        Candidates at each level are the children of entities that still
        carry a passing grant, the entities with a direct membership and the
        allow-listed entities. Each candidate is decided with the same rules
        as access_level_for.
        """
        teams = frozenset(await self.memberships.team_ids_for_user(user_id))
        grants: Dict[EntityRef, List[_Grant]] = {}

        for level in _CLOSURE_LEVELS:
            direct = {
                m.entity_id: m.role for m in await self.memberships.list_by_user(level, user_id)
            }

            candidates: Dict[UUID, EntityNode] = {}
            for parent_type in _PARENT_TYPES.get(level, ()):
                parent_ids = [ref.id for ref in grants if ref.type == parent_type]
                for node in await self.entities.list_children(level, parent_type, parent_ids):
                    candidates[node.id] = node
            for node in await self.entities.get_many(level, direct.keys()):
                candidates[node.id] = node
            for node in await self.entities.list_allow_listed(level, user_id, teams):
                candidates[node.id] = node

            found: List[AccessibleEntity] = []
            for node in candidates.values():
                admitted = not node.is_restricted or node.admits(user_id, teams)
                inherited: List[_Grant] = []
                for parent_grant in grants.get(node.parent, []) if node.parent else []:
                    grant = _Grant(
                        origin=parent_grant.origin,
                        role=parent_grant.role,
                        open=parent_grant.open and admitted,
                    )
                    if grant.passes():
                        inherited.append(grant)

                if node.id in direct:
                    role = direct[node.id]
                    access = AccessLevel(role=role)
                    inherited.insert(0, _Grant(origin=node.ref, role=role, open=True))
                elif inherited:
                    access = AccessLevel(role=inherited[0].role, origin=inherited[0].origin)
                elif node.admits(user_id, teams):
                    access = AccessLevel(role=ALLOW_LIST_ROLE, via_allow_list=True)
                else:
                    access = None

                if inherited:
                    grants[node.ref] = inherited
                if access is not None:
                    found.append(AccessibleEntity(entity=node, access=access))

            if level == target_type:
                found.sort(key=lambda item: (item.entity.name, str(item.entity.id)))
                return Return.ok(found)

        return Return.err(
            Error(ErrorCode.INVALID_ENTITY_TYPE, f"Cannot list accessible {target_type.value}")
        )

    async def get_accessible_workspaces(self, user_id: UUID) -> Result[List[AccessibleEntity]]:
        return await self._accessible(user_id, EntityType.workspace)

    async def get_accessible_spaces(self, user_id: UUID) -> Result[List[AccessibleEntity]]:
        return await self._accessible(user_id, EntityType.space)

    async def get_accessible_folders(self, user_id: UUID) -> Result[List[AccessibleEntity]]:
        return await self._accessible(user_id, EntityType.folder)

    async def get_accessible_projects(self, user_id: UUID) -> Result[List[AccessibleEntity]]:
        return await self._accessible(user_id, EntityType.project)
