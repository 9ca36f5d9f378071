"""Repository protocols (ports) for the membership bounded context.

Implementations never open or commit transactions; the application service
calling them owns the transaction, so one workflow operation commits as a
single unit.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from membership.domain.aggregates import (
    Channel,
    ChannelJoinRequest,
    ChannelMembership,
    Group,
    GroupJoinRequest,
    GroupMembership,
    User,
)
from membership.domain.value_objects import (
    ChannelId,
    GroupId,
    JoinRequestId,
    MembershipRole,
    UserId,
)


@runtime_checkable
class IUserRepository(Protocol):
    """Read access to local user profiles."""

    async def get_by_provider_id(self, provider_user_id: str) -> User | None:
        """Retrieve the user linked to an identity provider subject.

        Args:
            provider_user_id: The opaque id issued by the identity provider

        Returns:
            The User, or None if no profile has been provisioned
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by internal id."""
        ...


@runtime_checkable
class IScopeRepository(Protocol):
    """Lookup of the channels and groups join requests target."""

    async def get_channel(self, channel_id: ChannelId) -> Channel | None:
        """Retrieve a channel, or None if it does not exist."""
        ...

    async def get_group(self, group_id: GroupId) -> Group | None:
        """Retrieve a group, or None if it does not exist.

        Callers must check ``Group.belongs_to`` against the channel they
        were asked about.
        """
        ...


@runtime_checkable
class IMembershipRepository(Protocol):
    """Membership queries and creation for channels and groups."""

    async def is_channel_member(self, user_id: UserId, channel_id: ChannelId) -> bool:
        """Check whether the user holds any membership in the channel."""
        ...

    async def is_channel_owner(self, user_id: UserId, channel_id: ChannelId) -> bool:
        """Check whether the user holds an owner membership in the channel."""
        ...

    async def is_group_member(self, user_id: UserId, group_id: GroupId) -> bool:
        """Check whether the user is a member of the group."""
        ...

    async def create_channel_membership(
        self,
        user_id: UserId,
        channel_id: ChannelId,
        role: MembershipRole = MembershipRole.MEMBER,
    ) -> ChannelMembership:
        """Create a channel membership.

        Raises:
            MembershipCreationError: If the membership cannot be stored
                (including when one already exists for the pair)
        """
        ...

    async def create_group_membership(
        self, user_id: UserId, group_id: GroupId
    ) -> GroupMembership:
        """Create a group membership.

        Raises:
            MembershipCreationError: If the membership cannot be stored
        """
        ...


@runtime_checkable
class IChannelJoinRequestRepository(Protocol):
    """Store of pending channel join requests."""

    async def list_all(self, channel_id: ChannelId) -> list[ChannelJoinRequest]:
        """List every pending request in a channel, oldest first."""
        ...

    async def list_by_requestor(
        self, channel_id: ChannelId, requestor_id: UserId
    ) -> list[ChannelJoinRequest]:
        """List the pending requests one user sent to a channel (zero or one)."""
        ...

    async def get(self, request_id: JoinRequestId) -> ChannelJoinRequest | None:
        """Retrieve a request by id, in whichever channel it lives."""
        ...

    async def get_for_update(
        self, request_id: JoinRequestId
    ) -> ChannelJoinRequest | None:
        """Retrieve a request by id and lock it until the transaction ends.

        A concurrent caller blocks here until the holder commits; if the
        holder deleted the request, the caller then receives None.
        """
        ...

    async def get_for_requestor(
        self, channel_id: ChannelId, requestor_id: UserId
    ) -> ChannelJoinRequest | None:
        """Retrieve the user's pending request in a channel, if any."""
        ...

    async def create(
        self, channel_id: ChannelId, requestor: User, comment: str
    ) -> ChannelJoinRequest:
        """Store a new pending request.

        The caller has already checked that none exists.

        Raises:
            DuplicateJoinRequestError: If a concurrent create won the race
        """
        ...

    async def delete(self, request: ChannelJoinRequest) -> None:
        """Remove a request."""
        ...


@runtime_checkable
class IGroupJoinRequestRepository(Protocol):
    """Store of pending group join requests."""

    async def list_all(self, group_id: GroupId) -> list[GroupJoinRequest]:
        """List every pending request in a group, oldest first."""
        ...

    async def list_by_requestor(
        self, group_id: GroupId, requestor_id: UserId
    ) -> list[GroupJoinRequest]:
        """List the pending requests one user sent to a group (zero or one)."""
        ...

    async def get(self, request_id: JoinRequestId) -> GroupJoinRequest | None:
        """Retrieve a request by id, in whichever group it lives."""
        ...

    async def get_for_update(
        self, request_id: JoinRequestId
    ) -> GroupJoinRequest | None:
        """Retrieve a request by id and lock it until the transaction ends."""
        ...

    async def get_for_requestor(
        self, group_id: GroupId, requestor_id: UserId
    ) -> GroupJoinRequest | None:
        """Retrieve the user's pending request in a group, if any."""
        ...

    async def create(
        self,
        channel_id: ChannelId,
        group_id: GroupId,
        requestor: User,
        comment: str,
    ) -> GroupJoinRequest:
        """Store a new pending request.

        Raises:
            DuplicateJoinRequestError: If a concurrent create won the race
        """
        ...

    async def delete(self, request: GroupJoinRequest) -> None:
        """Remove a request."""
        ...
