"""SQLAlchemy ORM models for the membership bounded context.

These models map to database tables and are used by repository implementations.
"""

from membership.infrastructure.models.join_request import (
    ChannelJoinRequestModel,
    GroupJoinRequestModel,
)
from membership.infrastructure.models.membership import (
    ChannelMembershipModel,
    GroupMembershipModel,
)
from membership.infrastructure.models.scope import ChannelModel, GroupModel
from membership.infrastructure.models.user import UserModel

__all__ = [
    "ChannelJoinRequestModel",
    "ChannelMembershipModel",
    "ChannelModel",
    "GroupJoinRequestModel",
    "GroupMembershipModel",
    "GroupModel",
    "UserModel",
]
