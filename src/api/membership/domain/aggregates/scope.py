"""Channel and Group aggregates: the scopes a join request targets."""

from __future__ import annotations

from dataclasses import dataclass

from membership.domain.value_objects import ChannelId, GroupId


@dataclass(frozen=True)
class Channel:
    """Top-level scope. Channel owners moderate channel join requests."""

    id: ChannelId
    name: str


@dataclass(frozen=True)
class Group:
    """A scope nested inside exactly one channel.

    ``channel_id`` is fixed at creation. A group id is only meaningful
    together with its channel id; ``belongs_to`` is the guard used before
    any group-scoped operation.
    """

    id: GroupId
    channel_id: ChannelId
    name: str

    def belongs_to(self, channel_id: ChannelId) -> bool:
        """Check that this group lives in ``channel_id``."""
        return self.channel_id == channel_id
