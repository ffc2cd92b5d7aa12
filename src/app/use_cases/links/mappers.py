from src.app.use_cases.common import link_url
from src.domain.entities import InvitationLinkSettings

from .dtos import LinkSettingsResponse


def link_settings_response(settings: InvitationLinkSettings) -> LinkSettingsResponse:
    return LinkSettingsResponse(
        settings_id=str(settings.id),
        link_token=settings.link_token,
        link_url=link_url(settings.link_token),
        target_type=settings.target_type.value,
        target_id=str(settings.target_id),
        default_role=settings.default_role.value,
        default_permission=settings.default_permission.value,
        is_active=settings.is_active,
        requires_approval=settings.requires_approval,
        allowed_domains=list(settings.allowed_domains or []),
        blocked_domains=list(settings.blocked_domains or []),
        max_uses=settings.max_uses,
        use_count=settings.use_count,
        expires_at=settings.expires_at.isoformat() if settings.expires_at else None,
    )
