"""Membership records linking users to channels and groups."""

from __future__ import annotations

from dataclasses import dataclass

from membership.domain.value_objects import (
    ChannelId,
    GroupId,
    MembershipRole,
    UserId,
)


@dataclass(frozen=True)
class ChannelMembership:
    """A user's membership in a channel.

    At most one exists per (user, channel) pair.
    """

    user_id: UserId
    channel_id: ChannelId
    role: MembershipRole = MembershipRole.MEMBER

    def is_owner(self) -> bool:
        """Check if this membership carries owner rights."""
        return self.role == MembershipRole.OWNER


@dataclass(frozen=True)
class GroupMembership:
    """A user's membership in a group. Groups have no owner role."""

    user_id: UserId
    group_id: GroupId
