import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import load_target, resolver_for
from src.domain.base import utc_now
from src.domain.errors import ErrorCode

from .dtos import LinkSettingsResponse
from .mappers import link_settings_response

logger = logging.getLogger(__name__)


class DeactivateLinkSettingsUseCase:
    """Turns an invitation link off; managers of the target only."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, requester_id: UUID, settings_id: UUID) -> Result[LinkSettingsResponse]:
        async with self.uow:
            settings = await self.uow.invitation_links.get_by_id(settings_id)
            if settings is None:
                return Return.err(Error(ErrorCode.NOT_FOUND, "Invitation link not found"))

            node_result = await load_target(self.uow, settings.target_type, settings.target_id)
            if node_result.is_err():
                return node_result

            manager_result = await resolver_for(self.uow).require_manager(
                node_result.value, requester_id
            )
            if manager_result.is_err():
                return manager_result

            if not await self.uow.invitation_links.deactivate(settings_id, utc_now()):
                return Return.err(Error(ErrorCode.CONFLICT, "Invitation link is already inactive"))

            settings = await self.uow.invitation_links.get_by_id(settings_id)
            await self.uow.commit()

            logger.info(f"User {requester_id} deactivated invitation link {settings_id}")
            return Return.ok(link_settings_response(settings))
