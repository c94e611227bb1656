"""
Ticket Permission Model
=======================

Capability grants applied to a ticket channel.

Author: حَـــــنَّـــــا
"""

from typing import List

from .models import ALL_CAPABILITIES, PermissionGrant, SubjectKind


def build_ticket_grants(guild_id: int, owner_id: int, support_role_id: int) -> List[PermissionGrant]:
    """
    Grant set for a new ticket channel.

    The @everyone role shares the guild's id, so guild_id names the
    EVERYONE principal.

    Returns:
        Exactly three grants: deny-all for everyone, full access for the
        owner, full access for the support role.
    """
    return [
        PermissionGrant(SubjectKind.EVERYONE, guild_id, deny=ALL_CAPABILITIES),
        PermissionGrant(SubjectKind.MEMBER, owner_id, allow=ALL_CAPABILITIES),
        PermissionGrant(SubjectKind.ROLE, support_role_id, allow=ALL_CAPABILITIES),
    ]


def build_member_grant(member_id: int) -> PermissionGrant:
    """Full access for a member added to an existing ticket."""
    return PermissionGrant(SubjectKind.MEMBER, member_id, allow=ALL_CAPABILITIES)


__all__ = [
    "build_ticket_grants",
    "build_member_grant",
]
