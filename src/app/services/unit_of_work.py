from abc import ABC, abstractmethod

from src.app.repositories.access_request_repository import IAccessRequestRepository
from src.app.repositories.entity_repository import IEntityRepository
from src.app.repositories.invitation_activity_repository import IInvitationActivityRepository
from src.app.repositories.invitation_link_repository import IInvitationLinkRepository
from src.app.repositories.invitation_repository import IInvitationRepository
from src.app.repositories.membership_repository import IMembershipRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    entities: IEntityRepository
    memberships: IMembershipRepository
    users: IUserRepository
    invitations: IInvitationRepository
    invitation_links: IInvitationLinkRepository
    invitation_activities: IInvitationActivityRepository
    access_requests: IAccessRequestRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
