"""Join request aggregates.

A join request exists only while it is pending. Accepting, rejecting or
cancelling a request deletes it; no outcome is stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from membership.domain.aggregates.user import User
from membership.domain.value_objects import ChannelId, GroupId, JoinRequestId


@dataclass(frozen=True)
class ChannelJoinRequest:
    """A pending request from ``requestor`` to join a channel.

    Business rules (enforced by the workflow and the store):
    - At most one pending request per (channel, requestor)
    - No request may exist for a user who is already a channel member
    """

    id: JoinRequestId
    channel_id: ChannelId
    requestor: User
    comment: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls, channel_id: ChannelId, requestor: User, comment: str
    ) -> ChannelJoinRequest:
        """Factory method for a new pending channel join request.

        Args:
            channel_id: The channel the requestor wants to join
            requestor: The user sending the request
            comment: Free text shown to channel owners, kept verbatim

        Returns:
            A new ChannelJoinRequest with a fresh id
        """
        return cls(
            id=JoinRequestId.generate(),
            channel_id=channel_id,
            requestor=requestor,
            comment=comment,
        )

    def belongs_to(self, channel_id: ChannelId) -> bool:
        """Check that this request was sent to ``channel_id``."""
        return self.channel_id == channel_id

    def was_sent_by(self, user: User) -> bool:
        """Check whether ``user`` created this request."""
        return self.requestor.is_same_user(user)


@dataclass(frozen=True)
class GroupJoinRequest:
    """A pending request from ``requestor`` to join a group in a channel.

    Scoped by both channel and group so that a group id guessed under the
    wrong channel never reaches the request.
    """

    id: JoinRequestId
    channel_id: ChannelId
    group_id: GroupId
    requestor: User
    comment: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        channel_id: ChannelId,
        group_id: GroupId,
        requestor: User,
        comment: str,
    ) -> GroupJoinRequest:
        """Factory method for a new pending group join request."""
        return cls(
            id=JoinRequestId.generate(),
            channel_id=channel_id,
            group_id=group_id,
            requestor=requestor,
            comment=comment,
        )

    def belongs_to(self, channel_id: ChannelId, group_id: GroupId) -> bool:
        """Check that this request was sent to ``group_id`` in ``channel_id``."""
        return self.channel_id == channel_id and self.group_id == group_id

    def was_sent_by(self, user: User) -> bool:
        """Check whether ``user`` created this request."""
        return self.requestor.is_same_user(user)
