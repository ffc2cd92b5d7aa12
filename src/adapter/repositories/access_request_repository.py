from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.access_request_repository import IAccessRequestRepository
from src.domain.entities import AccessRequest, AccessRequestStatus, EntityType


class AccessRequestRepository(IAccessRequestRepository):
    """AccessRequest repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, access_request: AccessRequest) -> AccessRequest:
        """Create a new access request"""
        self.session.add(access_request)
        await self.session.flush()
        await self.session.refresh(access_request)
        return access_request

    async def get_by_id(self, request_id: UUID) -> Optional[AccessRequest]:
        """Get access request by ID"""
        stmt = (
            select(AccessRequest)
            .where(AccessRequest.id == request_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending(
        self, target_type: EntityType, target_id: UUID, email: str
    ) -> Optional[AccessRequest]:
        """Get the pending request of an address on a target"""
        stmt = select(AccessRequest).where(
            AccessRequest.target_type == target_type,
            AccessRequest.target_id == target_id,
            AccessRequest.email == email,
            AccessRequest.status == AccessRequestStatus.pending,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_by_target(
        self,
        target_type: EntityType,
        target_id: UUID,
        status: Optional[AccessRequestStatus] = None,
    ) -> List[AccessRequest]:
        """List requests on a target, newest first"""
        stmt = select(AccessRequest).where(
            AccessRequest.target_type == target_type,
            AccessRequest.target_id == target_id,
        )
        if status is not None:
            stmt = stmt.where(AccessRequest.status == status)
        stmt = stmt.order_by(AccessRequest.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_requester(
        self,
        requester_id: UUID,
        email: Optional[str] = None,
        status: Optional[AccessRequestStatus] = None,
    ) -> List[AccessRequest]:
        """List requests made by a user or from their address, newest first"""
        condition = AccessRequest.requester_id == requester_id
        if email is not None:
            condition = or_(condition, AccessRequest.email == email)
        stmt = select(AccessRequest).where(condition)
        if status is not None:
            stmt = stmt.where(AccessRequest.status == status)
        stmt = stmt.order_by(AccessRequest.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def transition_status(
        self,
        request_id: UUID,
        new_status: AccessRequestStatus,
        processed_by_id: UUID,
        now: datetime,
        denial_reason: Optional[str] = None,
    ) -> bool:
        """Conditional pending -> new_status update"""
        stmt = (
            update(AccessRequest)
            .where(
                AccessRequest.id == request_id,
                AccessRequest.status == AccessRequestStatus.pending,
            )
            .values(
                status=new_status,
                processed_by_id=processed_by_id,
                processed_at=now,
                denial_reason=denial_reason,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
