"""In-memory port implementations for membership service tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from membership.application.services import IdentityResolver, MembershipOracle
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
from membership.ports.exceptions import MembershipCreationError


@dataclass
class InMemoryStore:
    users: dict[str, User] = field(default_factory=dict)
    channels: dict[ChannelId, Channel] = field(default_factory=dict)
    groups: dict[GroupId, Group] = field(default_factory=dict)
    channel_memberships: dict[tuple[UserId, ChannelId], ChannelMembership] = field(
        default_factory=dict
    )
    group_memberships: set[tuple[UserId, GroupId]] = field(default_factory=set)
    channel_requests: dict[JoinRequestId, ChannelJoinRequest] = field(
        default_factory=dict
    )
    group_requests: dict[JoinRequestId, GroupJoinRequest] = field(
        default_factory=dict
    )

    def add_user(self, user: User) -> User:
        self.users[user.provider_user_id] = user
        return user

    def add_channel(self, name: str = "general") -> Channel:
        channel = Channel(id=ChannelId.generate(), name=name)
        self.channels[channel.id] = channel
        return channel

    def add_group(self, channel: Channel, name: str = "ops") -> Group:
        group = Group(id=GroupId.generate(), channel_id=channel.id, name=name)
        self.groups[group.id] = group
        return group

    def join_channel(
        self, user: User, channel: Channel, role: MembershipRole = MembershipRole.MEMBER
    ) -> None:
        self.channel_memberships[(user.id, channel.id)] = ChannelMembership(
            user_id=user.id, channel_id=channel.id, role=role
        )

    def join_group(self, user: User, group: Group) -> None:
        self.group_memberships.add((user.id, group.id))


class InMemoryUserRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_by_provider_id(self, provider_user_id: str) -> User | None:
        return self._store.users.get(provider_user_id)

    async def get_by_id(self, user_id: UserId) -> User | None:
        return next((u for u in self._store.users.values() if u.id == user_id), None)


class InMemoryScopeRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_channel(self, channel_id: ChannelId) -> Channel | None:
        return self._store.channels.get(channel_id)

    async def get_group(self, group_id: GroupId) -> Group | None:
        return self._store.groups.get(group_id)


class InMemoryMembershipRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def is_channel_member(self, user_id: UserId, channel_id: ChannelId) -> bool:
        return (user_id, channel_id) in self._store.channel_memberships

    async def is_channel_owner(self, user_id: UserId, channel_id: ChannelId) -> bool:
        membership = self._store.channel_memberships.get((user_id, channel_id))
        return membership is not None and membership.is_owner()

    async def is_group_member(self, user_id: UserId, group_id: GroupId) -> bool:
        return (user_id, group_id) in self._store.group_memberships

    async def create_channel_membership(
        self,
        user_id: UserId,
        channel_id: ChannelId,
        role: MembershipRole = MembershipRole.MEMBER,
    ) -> ChannelMembership:
        if (user_id, channel_id) in self._store.channel_memberships:
            raise MembershipCreationError("duplicate channel membership")
        membership = ChannelMembership(
            user_id=user_id, channel_id=channel_id, role=role
        )
        self._store.channel_memberships[(user_id, channel_id)] = membership
        return membership

    async def create_group_membership(
        self, user_id: UserId, group_id: GroupId
    ) -> GroupMembership:
        if (user_id, group_id) in self._store.group_memberships:
            raise MembershipCreationError("duplicate group membership")
        self._store.group_memberships.add((user_id, group_id))
        return GroupMembership(user_id=user_id, group_id=group_id)


class InMemoryChannelJoinRequestRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def list_all(self, channel_id: ChannelId) -> list[ChannelJoinRequest]:
        return [
            r
            for r in self._store.channel_requests.values()
            if r.channel_id == channel_id
        ]

    async def list_by_requestor(
        self, channel_id: ChannelId, requestor_id: UserId
    ) -> list[ChannelJoinRequest]:
        return [
            r
            for r in await self.list_all(channel_id)
            if r.requestor.id == requestor_id
        ]

    async def get(self, request_id: JoinRequestId) -> ChannelJoinRequest | None:
        return self._store.channel_requests.get(request_id)

    async def get_for_update(
        self, request_id: JoinRequestId
    ) -> ChannelJoinRequest | None:
        return self._store.channel_requests.get(request_id)

    async def get_for_requestor(
        self, channel_id: ChannelId, requestor_id: UserId
    ) -> ChannelJoinRequest | None:
        found = await self.list_by_requestor(channel_id, requestor_id)
        return found[0] if found else None

    async def create(
        self, channel_id: ChannelId, requestor: User, comment: str
    ) -> ChannelJoinRequest:
        request = ChannelJoinRequest.create(channel_id, requestor, comment)
        self._store.channel_requests[request.id] = request
        return request

    async def delete(self, request: ChannelJoinRequest) -> None:
        self._store.channel_requests.pop(request.id, None)


class InMemoryGroupJoinRequestRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def list_all(self, group_id: GroupId) -> list[GroupJoinRequest]:
        return [
            r for r in self._store.group_requests.values() if r.group_id == group_id
        ]

    async def list_by_requestor(
        self, group_id: GroupId, requestor_id: UserId
    ) -> list[GroupJoinRequest]:
        return [
            r for r in await self.list_all(group_id) if r.requestor.id == requestor_id
        ]

    async def get(self, request_id: JoinRequestId) -> GroupJoinRequest | None:
        return self._store.group_requests.get(request_id)

    async def get_for_update(
        self, request_id: JoinRequestId
    ) -> GroupJoinRequest | None:
        return self._store.group_requests.get(request_id)

    async def get_for_requestor(
        self, group_id: GroupId, requestor_id: UserId
    ) -> GroupJoinRequest | None:
        found = await self.list_by_requestor(group_id, requestor_id)
        return found[0] if found else None

    async def create(
        self, channel_id: ChannelId, group_id: GroupId, requestor: User, comment: str
    ) -> GroupJoinRequest:
        request = GroupJoinRequest.create(channel_id, group_id, requestor, comment)
        self._store.group_requests[request.id] = request
        return request

    async def delete(self, request: GroupJoinRequest) -> None:
        self._store.group_requests.pop(request.id, None)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def membership_repository(store) -> InMemoryMembershipRepository:
    return InMemoryMembershipRepository(store)


@pytest.fixture
def identity_resolver(store) -> IdentityResolver:
    return IdentityResolver(user_repository=InMemoryUserRepository(store))


@pytest.fixture
def membership_oracle(store, membership_repository) -> MembershipOracle:
    return MembershipOracle(
        scope_repository=InMemoryScopeRepository(store),
        membership_repository=membership_repository,
    )


@pytest.fixture
def channel_request_repository(store) -> InMemoryChannelJoinRequestRepository:
    return InMemoryChannelJoinRequestRepository(store)


@pytest.fixture
def group_request_repository(store) -> InMemoryGroupJoinRequestRepository:
    return InMemoryGroupJoinRequestRepository(store)
