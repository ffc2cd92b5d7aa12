"""
Access Engine Domain Enums

All enumeration types used across domain entities.
Every enum is closed: parsing an unknown string raises ValueError, which the
use cases turn into INVALID_INPUT / INVALID_ENTITY_TYPE errors.
"""

from enum import Enum


class EntityType(str, Enum):
    """Kinds of entity that carry memberships"""

    workspace = "workspace"
    space = "space"
    folder = "folder"
    project = "project"
    task = "task"
    team = "team"


class MemberRole(str, Enum):
    """Role held by a user on an entity"""

    owner = "owner"
    admin = "admin"
    lead = "lead"
    member = "member"
    limited_member = "limited_member"
    guest = "guest"


class PermissionLevel(str, Enum):
    """Coarse capability level attached to an invitation"""

    full_edit = "full_edit"
    edit = "edit"
    comment = "comment"
    view_only = "view_only"


class Visibility(str, Enum):
    """Whether inherited access flows into an entity unconditionally"""

    public = "public"
    restricted = "restricted"


class InvitationStatus(str, Enum):
    """Invitation status"""

    pending = "pending"
    accepted = "accepted"
    declined = "declined"
    expired = "expired"
    cancelled = "cancelled"
    revoked = "revoked"


class InvitationMethod(str, Enum):
    """How an invitation was issued"""

    email = "email"
    link = "link"
    direct = "direct"


class AccessRequestStatus(str, Enum):
    """Access request status"""

    pending = "pending"
    approved = "approved"
    denied = "denied"


class InvitationAction(str, Enum):
    """Actions recorded in the invitation activity log"""

    created = "created"
    accepted = "accepted"
    declined = "declined"
    expired = "expired"
    resent = "resent"
    token_regenerated = "token_regenerated"
    cancelled = "cancelled"
    revoked = "revoked"
    link_redeemed = "link_redeemed"


class PermissionAction(str, Enum):
    """Action checked against a user's effective role"""

    view = "view"
    edit = "edit"
    manage = "manage"
    delete = "delete"
