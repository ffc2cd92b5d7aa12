"""
Invitation Use Cases

Token invitations: create, redeem, decline, resend and withdraw.
"""

from .accept_invitation_use_case import AcceptInvitationByIdUseCase, AcceptInvitationUseCase
from .cancel_invitation_use_case import CancelInvitationUseCase, RevokeInvitationUseCase
from .create_invitation_use_case import (
    CreateInvitationUseCase,
    CreateProjectInvitationUseCase,
    CreateWorkspaceInvitationUseCase,
)
from .decline_invitation_use_case import DeclineInvitationUseCase
from .dtos import (
    AcceptInvitationResponse,
    InvitationDetailResponse,
    InvitationListResponse,
    InvitationResponse,
    InvitationStatsResponse,
    InvitationStatusResponse,
    InvitationSummary,
    ResendInvitationResponse,
)
from .invitation_stats_use_case import (
    GetInvitationStatsUseCase,
    GetWorkspaceInvitationStatsUseCase,
)
from .list_invitations_use_case import (
    GetInvitationUseCase,
    ListMyInvitationsUseCase,
    ListPendingInvitationsUseCase,
)
from .resend_invitation_use_case import RegenerateTokenUseCase, ResendInvitationUseCase

__all__ = [
    "CreateInvitationUseCase",
    "CreateWorkspaceInvitationUseCase",
    "CreateProjectInvitationUseCase",
    "AcceptInvitationUseCase",
    "AcceptInvitationByIdUseCase",
    "DeclineInvitationUseCase",
    "ResendInvitationUseCase",
    "RegenerateTokenUseCase",
    "CancelInvitationUseCase",
    "RevokeInvitationUseCase",
    "ListPendingInvitationsUseCase",
    "ListMyInvitationsUseCase",
    "GetInvitationUseCase",
    "GetInvitationStatsUseCase",
    "GetWorkspaceInvitationStatsUseCase",
    "InvitationResponse",
    "AcceptInvitationResponse",
    "InvitationStatusResponse",
    "ResendInvitationResponse",
    "InvitationSummary",
    "InvitationListResponse",
    "InvitationDetailResponse",
    "InvitationStatsResponse",
]
