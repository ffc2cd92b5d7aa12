from src.domain.entities import Invitation

from .dtos import InvitationSummary


def invitation_summary(invitation: Invitation) -> InvitationSummary:
    return InvitationSummary(
        invite_id=str(invitation.id),
        email=invitation.email,
        target_type=invitation.target_type.value,
        target_id=str(invitation.target_id),
        role=invitation.role.value,
        permission=invitation.permission.value,
        status=invitation.status.value,
        method=invitation.method.value,
        invited_by_id=str(invitation.invited_by_id) if invitation.invited_by_id else None,
        reminder_count=invitation.reminder_count,
        created_at=invitation.created_at.isoformat(),
        expires_at=invitation.expires_at.isoformat() if invitation.expires_at else None,
    )
