"""Scope lookup and membership questions for the join request workflows.

Answers come from the live store inside the caller's transaction and are
never cached.
"""

from __future__ import annotations

from membership.domain.aggregates import Channel, Group
from membership.domain.value_objects import ChannelId, GroupId, UserId
from membership.ports.exceptions import ChannelNotFoundError, GroupNotFoundError
from membership.ports.repositories import IMembershipRepository, IScopeRepository


class MembershipOracle:
    """Resolves channels and groups and reports a user's standing in them."""

    def __init__(
        self,
        scope_repository: IScopeRepository,
        membership_repository: IMembershipRepository,
    ):
        self._scope_repository = scope_repository
        self._membership_repository = membership_repository

    async def get_channel(self, channel_id: ChannelId) -> Channel:
        """Return the channel or raise ChannelNotFoundError."""
        channel = await self._scope_repository.get_channel(channel_id)
        if channel is None:
            raise ChannelNotFoundError(f"Channel {channel_id} not found")
        return channel

    async def get_group(self, channel_id: ChannelId, group_id: GroupId) -> Group:
        """Return the group if it exists inside the given channel.

        A group that exists under a different channel is reported the same
        way as a missing one.

        Raises:
            GroupNotFoundError: If the group is absent from the channel
        """
        group = await self._scope_repository.get_group(group_id)
        if group is None or not group.belongs_to(channel_id):
            raise GroupNotFoundError(
                f"Group {group_id} not found in channel {channel_id}"
            )
        return group

    async def is_channel_member(self, user_id: UserId, channel_id: ChannelId) -> bool:
        return await self._membership_repository.is_channel_member(user_id, channel_id)

    async def is_channel_owner(self, user_id: UserId, channel_id: ChannelId) -> bool:
        return await self._membership_repository.is_channel_owner(user_id, channel_id)

    async def is_group_member(self, user_id: UserId, group_id: GroupId) -> bool:
        return await self._membership_repository.is_group_member(user_id, group_id)
