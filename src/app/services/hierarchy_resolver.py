"""
Hierarchy Resolver

Walks parent pointers from any entity up to its workspace.
"""

from typing import List
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.repositories.entity_repository import IEntityRepository
from src.domain.access import EntityNode, EntityRef
from src.domain.entities import EntityType
from src.domain.errors import ErrorCode

# Task > Project > Folder > Space > Workspace
MAX_DEPTH = 4


class HierarchyResolver:
    def __init__(self, entities: IEntityRepository):
        self.entities = entities

    async def get_node(self, entity_type: EntityType, entity_id: UUID) -> Result[EntityNode]:
        node = await self.entities.get(entity_type, entity_id)
        if node is None:
            return Return.err(
                Error(ErrorCode.NOT_FOUND, f"{entity_type.value} {entity_id} not found")
            )
        return Return.ok(node)

    async def ancestors(self, node: EntityNode) -> Result[List[EntityNode]]:
        """
        Ancestor nodes ordered from the immediate parent to the workspace.

        A missing parent is a data-integrity error and fails with NOT_FOUND,
        as does a chain longer than the hierarchy allows.
        """
        chain: List[EntityNode] = []
        current = node
        while current.parent is not None:
            if len(chain) >= MAX_DEPTH:
                return Return.err(
                    Error(ErrorCode.NOT_FOUND, f"Parent chain of {node.ref} does not terminate")
                )
            parent = await self.entities.get(current.parent.type, current.parent.id)
            if parent is None:
                return Return.err(
                    Error(
                        ErrorCode.NOT_FOUND,
                        f"Dangling parent {current.parent} of {current.ref}",
                    )
                )
            chain.append(parent)
            current = parent

        if current.type != EntityType.workspace:
            return Return.err(
                Error(ErrorCode.NOT_FOUND, f"{node.ref} is not rooted in a workspace")
            )
        return Return.ok(chain)

    async def parent_chain(
        self, entity_type: EntityType, entity_id: UUID
    ) -> Result[List[EntityRef]]:
        node_result = await self.get_node(entity_type, entity_id)
        if node_result.is_err():
            return node_result
        chain_result = await self.ancestors(node_result.value)
        if chain_result.is_err():
            return chain_result
        return Return.ok([ancestor.ref for ancestor in chain_result.value])

    async def workspace_of(self, node: EntityNode) -> Result[UUID]:
        if node.type == EntityType.workspace:
            return Return.ok(node.id)
        chain_result = await self.ancestors(node)
        if chain_result.is_err():
            return chain_result
        return Return.ok(chain_result.value[-1].id)
