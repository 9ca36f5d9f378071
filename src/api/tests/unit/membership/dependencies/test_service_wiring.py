"""Unit tests for the membership dependency providers."""

from unittest.mock import AsyncMock

from membership.application.services import (
    ChannelJoinRequestService,
    GroupJoinRequestService,
)
from membership.dependencies.access import (
    get_identity_resolver,
    get_membership_oracle,
    get_membership_repository,
    get_observation_context,
)
from membership.dependencies.channel_join_request import (
    get_channel_join_request_repository,
    get_channel_join_request_service,
    get_channel_join_request_service_probe,
)
from membership.dependencies.group_join_request import (
    get_group_join_request_repository,
    get_group_join_request_service,
    get_group_join_request_service_probe,
)


class TestObservationContext:
    def test_carries_request_header(self):
        assert get_observation_context("req-42").request_id == "req-42"

    def test_header_is_optional(self):
        assert get_observation_context().as_dict() == {}


class TestProbeBinding:
    def test_channel_probe_is_bound_to_channel(self):
        probe = get_channel_join_request_service_probe(
            "01CHANNEL", get_observation_context("req-1")
        )

        assert probe._context.channel_id == "01CHANNEL"
        assert probe._context.request_id == "req-1"

    def test_group_probe_is_bound_to_group_and_channel(self):
        probe = get_group_join_request_service_probe(
            "01CHANNEL", "01GROUP", get_observation_context()
        )

        assert probe._context.channel_id == "01CHANNEL"
        assert probe._context.group_id == "01GROUP"


class TestServiceAssembly:
    def test_channel_service_shares_one_session(self):
        session = AsyncMock()
        membership_repo = get_membership_repository(session)

        service = get_channel_join_request_service(
            session=session,
            identity_resolver=get_identity_resolver(session),
            membership_oracle=get_membership_oracle(session, membership_repo),
            membership_repo=membership_repo,
            request_repo=get_channel_join_request_repository(session),
            probe=get_channel_join_request_service_probe(
                "01CHANNEL", get_observation_context()
            ),
        )

        assert isinstance(service, ChannelJoinRequestService)
        assert service._session is session
        assert service._requests._session is session
        assert service._membership_repository is membership_repo

    def test_group_service(self):
        session = AsyncMock()
        membership_repo = get_membership_repository(session)

        service = get_group_join_request_service(
            session=session,
            identity_resolver=get_identity_resolver(session),
            membership_oracle=get_membership_oracle(session, membership_repo),
            membership_repo=membership_repo,
            request_repo=get_group_join_request_repository(session),
            probe=get_group_join_request_service_probe(
                "01CHANNEL", "01GROUP", get_observation_context()
            ),
        )

        assert isinstance(service, GroupJoinRequestService)
        assert service._session is session
