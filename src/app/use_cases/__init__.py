"""
Use Cases

Organized into domain folders:
- access/: effective access decisions and reverse queries
- members/: direct memberships, roles and the visibility overlay
- invitations/: token invitations
- links/: shareable invitation links
- access_requests/: user-initiated join requests

Import from subdirectories.
"""
