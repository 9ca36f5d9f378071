"""Application services for the membership bounded context."""

from membership.application.services.channel_join_request_service import (
    ChannelJoinRequestService,
)
from membership.application.services.group_join_request_service import (
    GroupJoinRequestService,
)
from membership.application.services.identity_resolver import IdentityResolver
from membership.application.services.membership_oracle import MembershipOracle

__all__ = [
    "ChannelJoinRequestService",
    "GroupJoinRequestService",
    "IdentityResolver",
    "MembershipOracle",
]
