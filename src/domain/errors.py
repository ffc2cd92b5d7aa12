"""
Error codes returned inside ``libs.result.Error``.

Business failures are returned, not raised. Anything that escapes a use case
as an exception (SQLAlchemyError and friends) is an internal error.
"""

from enum import Enum


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    INVALID_ENTITY_TYPE = "INVALID_ENTITY_TYPE"
    INVALID_INPUT = "INVALID_INPUT"
    LAST_OWNER = "LAST_OWNER"
    INVALID_TOKEN = "INVALID_TOKEN"
    EXPIRED = "EXPIRED"

    def __str__(self) -> str:
        return self.value


class DuplicateMembershipError(Exception):
    """Raised by the membership store when (entity, user) already exists."""

    def __init__(self, entity_type, entity_id, user_id):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.user_id = user_id
        super().__init__(f"User {user_id} is already a member of {entity_type} {entity_id}")
