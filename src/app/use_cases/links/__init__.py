"""
Invitation Link Use Cases

Shareable, usage-limited links that mint invitations on redemption.
"""

from .create_link_settings_use_case import CreateLinkSettingsUseCase
from .deactivate_link_settings_use_case import DeactivateLinkSettingsUseCase
from .dtos import LinkRedemptionResponse, LinkSettingsResponse
from .use_invitation_link_use_case import UseInvitationLinkUseCase

__all__ = [
    "CreateLinkSettingsUseCase",
    "DeactivateLinkSettingsUseCase",
    "UseInvitationLinkUseCase",
    "LinkSettingsResponse",
    "LinkRedemptionResponse",
]
