"""Concurrency tests for the join request workflows against PostgreSQL.

Each competing operation runs in its own session, so the row locks and
unique constraints of the real database decide the outcome.
"""

from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from membership.application.services import (
    ChannelJoinRequestService,
    GroupJoinRequestService,
    IdentityResolver,
    MembershipOracle,
)
from membership.application.value_objects import Caller
from membership.domain.value_objects import (
    ChannelId,
    GroupId,
    MembershipRole,
    UserId,
)
from membership.infrastructure.channel_join_request_repository import (
    ChannelJoinRequestRepository,
)
from membership.infrastructure.group_join_request_repository import (
    GroupJoinRequestRepository,
)
from membership.infrastructure.membership_repository import MembershipRepository
from membership.infrastructure.models import (
    ChannelJoinRequestModel,
    ChannelMembershipModel,
    ChannelModel,
    GroupJoinRequestModel,
    GroupMembershipModel,
    GroupModel,
    UserModel,
)
from membership.infrastructure.scope_repository import ScopeRepository
from membership.infrastructure.user_repository import UserRepository
from membership.ports.exceptions import JoinRequestNotFoundError

pytestmark = pytest.mark.integration


def _channel_service(session: AsyncSession) -> ChannelJoinRequestService:
    memberships = MembershipRepository(session=session)
    return ChannelJoinRequestService(
        session=session,
        identity_resolver=IdentityResolver(UserRepository(session=session)),
        membership_oracle=MembershipOracle(
            ScopeRepository(session=session), memberships
        ),
        membership_repository=memberships,
        join_request_repository=ChannelJoinRequestRepository(session=session),
    )


def _group_service(session: AsyncSession) -> GroupJoinRequestService:
    memberships = MembershipRepository(session=session)
    return GroupJoinRequestService(
        session=session,
        identity_resolver=IdentityResolver(UserRepository(session=session)),
        membership_oracle=MembershipOracle(
            ScopeRepository(session=session), memberships
        ),
        membership_repository=memberships,
        join_request_repository=GroupJoinRequestRepository(session=session),
    )


async def _seed(factory: async_sessionmaker[AsyncSession], *batches) -> None:
    """Insert rows batch by batch so parents exist before children."""
    async with factory() as session, session.begin():
        for batch in batches:
            session.add_all(batch)
            await session.flush()


def _user(name: str) -> UserModel:
    return UserModel(
        id=UserId.generate().value, provider_user_id=f"auth0|{name}", name=name
    )


async def _count(factory, model, **filters) -> int:
    async with factory() as session:
        stmt = select(func.count()).select_from(model).filter_by(**filters)
        return (await session.execute(stmt)).scalar_one()


@pytest_asyncio.fixture
async def channel_scene(session_factory):
    """A channel with an owner and one user who has not joined."""
    owner, requestor = _user("owner"), _user("requestor")
    channel = ChannelModel(id=ChannelId.generate().value, name="general")
    await _seed(
        session_factory,
        [owner, requestor],
        [channel],
        [
            ChannelMembershipModel(
                user_id=owner.id,
                channel_id=channel.id,
                role=MembershipRole.OWNER.value,
            )
        ],
    )
    return owner, requestor, ChannelId(value=channel.id)


class TestChannelRaces:
    @pytest.mark.asyncio
    async def test_concurrent_creates_yield_one_request(
        self, session_factory, channel_scene
    ):
        _, requestor, channel_id = channel_scene
        caller = Caller(provider_user_id=requestor.provider_user_id)

        async def create(comment: str):
            async with session_factory() as session:
                return await _channel_service(session).create_request(
                    channel_id, caller, comment
                )

        results = await asyncio.gather(create("first"), create("second"))

        assert results[0].id == results[1].id
        assert await _count(session_factory, ChannelJoinRequestModel) == 1

    @pytest.mark.asyncio
    async def test_accept_and_reject_race_has_one_winner(
        self, session_factory, channel_scene
    ):
        owner, requestor, channel_id = channel_scene
        async with session_factory() as session:
            request = await _channel_service(session).create_request(
                channel_id, Caller(requestor.provider_user_id), "please add me"
            )
        owner_caller = Caller(owner.provider_user_id)

        async def decide(action: str):
            async with session_factory() as session:
                service = _channel_service(session)
                return await getattr(service, action)(
                    channel_id, request.id, owner_caller
                )

        results = await asyncio.gather(
            decide("accept_request"),
            decide("reject_request"),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], JoinRequestNotFoundError)
        assert await _count(session_factory, ChannelJoinRequestModel) == 0

        accepted = results[0] is None
        members = await _count(
            session_factory, ChannelMembershipModel, user_id=requestor.id
        )
        assert members == (1 if accepted else 0)

    @pytest.mark.asyncio
    async def test_double_accept_creates_one_membership(
        self, session_factory, channel_scene
    ):
        owner, requestor, channel_id = channel_scene
        async with session_factory() as session:
            request = await _channel_service(session).create_request(
                channel_id, Caller(requestor.provider_user_id), ""
            )

        async def accept():
            async with session_factory() as session:
                await _channel_service(session).accept_request(
                    channel_id, request.id, Caller(owner.provider_user_id)
                )

        results = await asyncio.gather(accept(), accept(), return_exceptions=True)

        assert sum(isinstance(r, JoinRequestNotFoundError) for r in results) == 1
        assert (
            await _count(session_factory, ChannelMembershipModel, user_id=requestor.id)
            == 1
        )


class TestGroupRaces:
    @pytest.mark.asyncio
    async def test_accept_and_cancel_race_has_one_winner(self, session_factory):
        member, requestor = _user("member"), _user("requestor")
        channel = ChannelModel(id=ChannelId.generate().value, name="eng")
        group = GroupModel(
            id=GroupId.generate().value, channel_id=channel.id, name="ops"
        )
        await _seed(
            session_factory,
            [member, requestor],
            [channel],
            [group],
            [
                ChannelMembershipModel(
                    user_id=member.id, channel_id=channel.id, role="member"
                ),
                ChannelMembershipModel(
                    user_id=requestor.id, channel_id=channel.id, role="member"
                ),
                GroupMembershipModel(user_id=member.id, group_id=group.id),
            ],
        )
        channel_id, group_id = ChannelId(value=channel.id), GroupId(value=group.id)
        async with session_factory() as session:
            request = await _group_service(session).create_request(
                channel_id, group_id, Caller(requestor.provider_user_id), "ops please"
            )

        async def accept():
            async with session_factory() as session:
                await _group_service(session).accept_request(
                    channel_id, group_id, request.id, Caller(member.provider_user_id)
                )

        async def cancel():
            async with session_factory() as session:
                await _group_service(session).cancel_request(
                    channel_id, group_id, request.id, Caller(requestor.provider_user_id)
                )

        results = await asyncio.gather(accept(), cancel(), return_exceptions=True)

        assert sum(isinstance(r, JoinRequestNotFoundError) for r in results) == 1
        assert await _count(session_factory, GroupJoinRequestModel) == 0
        in_group = await _count(
            session_factory, GroupMembershipModel, user_id=requestor.id
        )
        assert in_group == (1 if results[0] is None else 0)
