from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.domain.access import EntityNode, EntityRef
from src.domain.entities import MEMBER_MODELS, EntityType, Visibility

REPOSITORY_METHODS = {
    "entities": [
        "get",
        "get_many",
        "list_children",
        "list_allow_listed",
        "lock_workspace",
        "update_access_control",
    ],
    "memberships": [
        "get",
        "list_by_entity",
        "list_by_user",
        "count_by_role",
        "create",
        "update_role",
        "delete",
        "team_ids_for_user",
    ],
    "users": ["get_by_email", "get_by_id", "create"],
    "invitations": [
        "get_by_id",
        "get_by_token",
        "get_pending_by_target_and_email",
        "list_pending_by_target",
        "list_pending_by_email",
        "create",
        "transition_status",
        "rotate_token",
        "create_permissions",
        "get_permissions",
        "get_stats_by_workspace",
        "get_stats_by_target",
    ],
    "invitation_links": [
        "create",
        "get_by_id",
        "get_by_token",
        "get_active_for_target",
        "deactivate_for_target",
        "deactivate",
        "try_consume",
    ],
    "invitation_activities": ["create", "list_by_invitation"],
    "access_requests": [
        "create",
        "get_by_id",
        "get_pending",
        "list_by_target",
        "list_by_requester",
        "transition_status",
    ],
}


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    for repo_name, methods in REPOSITORY_METHODS.items():
        repo = MagicMock()
        for method in methods:
            setattr(repo, method, AsyncMock())
        setattr(uow, repo_name, repo)

    # Repositories hand back what they were given
    uow.invitations.create.side_effect = lambda invitation: invitation
    uow.invitation_activities.create.side_effect = lambda activity: activity
    uow.access_requests.create.side_effect = lambda request: request
    uow.invitation_links.create.side_effect = lambda settings: settings
    return uow


class Directory:
    """In-memory hierarchy and memberships behind the mocked repositories."""

    def __init__(self, uow):
        self.uow = uow
        self.nodes = {}
        self.members = {}
        self.teams = {}

        uow.entities.get.side_effect = lambda t, i: self.nodes.get((t, i))
        uow.memberships.get.side_effect = lambda t, i, u: self.members.get((t, i, u))
        uow.memberships.list_by_entity.side_effect = lambda t, i: [
            m for (mt, mi, _), m in self.members.items() if (mt, mi) == (t, i)
        ]
        uow.memberships.list_by_user.side_effect = lambda t, u: [
            m for (mt, _, mu), m in self.members.items() if (mt, mu) == (t, u)
        ]
        uow.memberships.count_by_role.side_effect = lambda t, i, r: sum(
            1 for (mt, mi, _), m in self.members.items() if (mt, mi) == (t, i) and m.role == r
        )
        uow.memberships.team_ids_for_user.side_effect = lambda u: set(self.teams.get(u, ()))
        uow.memberships.create.side_effect = self._create_member
        uow.memberships.delete.side_effect = self._delete_member

    def add(
        self,
        entity_type,
        parent=None,
        name=None,
        visibility=Visibility.public,
        allowed_users=(),
        allowed_teams=(),
        created_by_id=None,
    ):
        node = EntityNode(
            type=entity_type,
            id=uuid4(),
            name=name or entity_type.value,
            parent=EntityRef(type=parent.type, id=parent.id) if parent else None,
            visibility=visibility,
            allowed_users=frozenset(allowed_users),
            allowed_teams=frozenset(allowed_teams),
            created_by_id=created_by_id,
        )
        self.nodes[(node.type, node.id)] = node
        return node

    def grant(self, node, user_id, role):
        model = MEMBER_MODELS[node.type]
        membership = model(id=uuid4(), entity_id=node.id, user_id=user_id, role=role)
        self.members[(node.type, node.id, user_id)] = membership
        return membership

    def join_team(self, user_id, team_id):
        self.teams.setdefault(user_id, set()).add(team_id)

    def _create_member(self, entity_type, entity_id, user_id, role, added_by_id=None):
        model = MEMBER_MODELS[entity_type]
        membership = model(
            id=uuid4(), entity_id=entity_id, user_id=user_id, role=role, added_by_id=added_by_id
        )
        self.members[(entity_type, entity_id, user_id)] = membership
        return membership

    def _delete_member(self, membership):
        self.members.pop((membership.entity_type, membership.entity_id, membership.user_id), None)


@pytest.fixture
def directory(mock_uow):
    return Directory(mock_uow)


@pytest.fixture
def workspace_tree(directory):
    """Workspace > Space > Folder > Project > Task"""
    workspace = directory.add(EntityType.workspace, name="Acme")
    space = directory.add(EntityType.space, parent=workspace, name="Engineering")
    folder = directory.add(EntityType.folder, parent=space, name="Backend")
    project = directory.add(EntityType.project, parent=folder, name="API")
    task = directory.add(EntityType.task, parent=project, name="Fix login")
    return workspace, space, folder, project, task
