import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.entities import (
    MEMBER_MODELS,
    Folder,
    Project,
    Space,
    Task,
    Team,
    User,
    Visibility,
    Workspace,
)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def uow_factory(session_factory):
    """Fresh unit of work on its own session; sessions are closed at teardown."""
    sessions = []

    def make():
        session = session_factory()
        sessions.append(session)
        return SqlAlchemyUnitOfWork(session)

    yield make
    for session in sessions:
        await session.close()


class Seeder:
    """Writes fixture rows directly through one session."""

    def __init__(self, session):
        self.session = session

    async def _save(self, row):
        self.session.add(row)
        await self.session.commit()
        return row

    async def user(self, email):
        return await self._save(User(email=email))

    async def workspace(self, name="Acme", created_by_id=None):
        return await self._save(Workspace(name=name, created_by_id=created_by_id))

    async def space(self, workspace, name="Engineering", **access):
        return await self._save(Space(name=name, workspace_id=workspace.id, **access))

    async def folder(self, space, name="Backend", **access):
        return await self._save(Folder(name=name, space_id=space.id, **access))

    async def project(self, space, folder=None, name="API", **access):
        return await self._save(
            Project(
                name=name,
                space_id=space.id,
                folder_id=folder.id if folder else None,
                **access,
            )
        )

    async def task(self, project, name="Fix login", **access):
        return await self._save(Task(name=name, project_id=project.id, **access))

    async def team(self, workspace, name="Platform"):
        return await self._save(Team(name=name, workspace_id=workspace.id))

    async def grant(self, entity_type, entity, user, role):
        model = MEMBER_MODELS[entity_type]
        return await self._save(model(entity_id=entity.id, user_id=user.id, role=role))

    @staticmethod
    def restricted(*users, teams=()):
        return dict(
            visibility=Visibility.restricted,
            allowed_users=[str(u.id) for u in users],
            allowed_teams=[str(t.id) for t in teams],
        )


@pytest_asyncio.fixture
async def seed(db_session):
    return Seeder(db_session)
