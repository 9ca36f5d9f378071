"""PostgreSQL implementation of IMembershipRepository.

Inserts run inside a savepoint so that a constraint violation rolls back
only the insert; the calling service decides whether the surrounding
transaction survives.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from membership.domain.aggregates import ChannelMembership, GroupMembership
from membership.domain.value_objects import (
    ChannelId,
    GroupId,
    MembershipRole,
    UserId,
)
from membership.infrastructure.models import (
    ChannelMembershipModel,
    GroupMembershipModel,
)
from membership.infrastructure.observability import (
    DefaultMembershipRepositoryProbe,
    MembershipRepositoryProbe,
)
from membership.ports.exceptions import MembershipCreationError
from membership.ports.repositories import IMembershipRepository


class MembershipRepository(IMembershipRepository):
    """PostgreSQL-backed membership queries and inserts."""

    def __init__(
        self, session: AsyncSession, probe: MembershipRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultMembershipRepositoryProbe()

    async def is_channel_member(self, user_id: UserId, channel_id: ChannelId) -> bool:
        stmt = select(ChannelMembershipModel.user_id).where(
            ChannelMembershipModel.user_id == user_id.value,
            ChannelMembershipModel.channel_id == channel_id.value,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def is_channel_owner(self, user_id: UserId, channel_id: ChannelId) -> bool:
        stmt = select(ChannelMembershipModel.user_id).where(
            ChannelMembershipModel.user_id == user_id.value,
            ChannelMembershipModel.channel_id == channel_id.value,
            ChannelMembershipModel.role == MembershipRole.OWNER.value,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def is_group_member(self, user_id: UserId, group_id: GroupId) -> bool:
        stmt = select(GroupMembershipModel.user_id).where(
            GroupMembershipModel.user_id == user_id.value,
            GroupMembershipModel.group_id == group_id.value,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create_channel_membership(
        self,
        user_id: UserId,
        channel_id: ChannelId,
        role: MembershipRole = MembershipRole.MEMBER,
    ) -> ChannelMembership:
        """Insert a channel membership.

        Raises:
            MembershipCreationError: If the insert violates a constraint
        """
        model = ChannelMembershipModel(
            user_id=user_id.value,
            channel_id=channel_id.value,
            role=role.value,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as e:
            self._probe.membership_conflict(channel_id.value, user_id.value, str(e))
            raise MembershipCreationError(
                f"Could not add user {user_id} to channel {channel_id}"
            ) from e

        self._probe.channel_membership_created(
            channel_id=channel_id.value, user_id=user_id.value, role=role.value
        )
        return ChannelMembership(user_id=user_id, channel_id=channel_id, role=role)

    async def create_group_membership(
        self, user_id: UserId, group_id: GroupId
    ) -> GroupMembership:
        """Insert a group membership.

        Raises:
            MembershipCreationError: If the insert violates a constraint
        """
        model = GroupMembershipModel(user_id=user_id.value, group_id=group_id.value)
        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as e:
            self._probe.membership_conflict(group_id.value, user_id.value, str(e))
            raise MembershipCreationError(
                f"Could not add user {user_id} to group {group_id}"
            ) from e

        self._probe.group_membership_created(
            group_id=group_id.value, user_id=user_id.value
        )
        return GroupMembership(user_id=user_id, group_id=group_id)
