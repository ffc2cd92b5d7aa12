from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.access_request_repository import AccessRequestRepository
from src.adapter.repositories.entity_repository import EntityRepository
from src.adapter.repositories.invitation_activity_repository import InvitationActivityRepository
from src.adapter.repositories.invitation_link_repository import InvitationLinkRepository
from src.adapter.repositories.invitation_repository import InvitationRepository
from src.adapter.repositories.membership_repository import MembershipRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.entities = EntityRepository(self.session)
        self.memberships = MembershipRepository(self.session)
        self.users = UserRepository(self.session)
        self.invitations = InvitationRepository(self.session)
        self.invitation_links = InvitationLinkRepository(self.session)
        self.invitation_activities = InvitationActivityRepository(self.session)
        self.access_requests = AccessRequestRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed explicitly is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
