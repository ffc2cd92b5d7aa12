from src.domain.entities import AccessRequest

from .dtos import AccessRequestResponse


def access_request_response(request: AccessRequest) -> AccessRequestResponse:
    return AccessRequestResponse(
        request_id=str(request.id),
        status=request.status.value,
        target_type=request.target_type.value,
        target_id=str(request.target_id),
        email=request.email,
        requester_id=str(request.requester_id) if request.requester_id else None,
        requested_role=request.requested_role.value if request.requested_role else None,
        message=request.message,
        processed_by_id=str(request.processed_by_id) if request.processed_by_id else None,
        processed_at=request.processed_at.isoformat() if request.processed_at else None,
        denial_reason=request.denial_reason,
        created_at=request.created_at.isoformat(),
    )
