"""
Access Request Use Cases

User-initiated join requests and their approval.
"""

from .create_access_request_use_case import CreateAccessRequestUseCase
from .dtos import AccessRequestListResponse, AccessRequestResponse, ProcessAccessRequestResponse
from .list_access_requests_use_case import ListAccessRequestsUseCase
from .list_my_access_requests_use_case import ListMyAccessRequestsUseCase
from .process_access_request_use_case import ProcessAccessRequestUseCase

__all__ = [
    "CreateAccessRequestUseCase",
    "ProcessAccessRequestUseCase",
    "ListAccessRequestsUseCase",
    "ListMyAccessRequestsUseCase",
    "AccessRequestResponse",
    "ProcessAccessRequestResponse",
    "AccessRequestListResponse",
]
