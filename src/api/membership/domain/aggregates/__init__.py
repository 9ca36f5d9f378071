"""Domain aggregates for the membership context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from membership.domain.aggregates.join_request import (
    ChannelJoinRequest,
    GroupJoinRequest,
)
from membership.domain.aggregates.membership import ChannelMembership, GroupMembership
from membership.domain.aggregates.scope import Channel, Group
from membership.domain.aggregates.user import User

__all__ = [
    "Channel",
    "ChannelJoinRequest",
    "ChannelMembership",
    "Group",
    "GroupJoinRequest",
    "GroupMembership",
    "User",
]
