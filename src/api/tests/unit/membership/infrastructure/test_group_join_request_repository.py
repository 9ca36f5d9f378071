"""Unit tests for GroupJoinRequestRepository with a mocked session."""

from datetime import UTC, datetime
from unittest.mock import MagicMock, create_autospec

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError

from membership.domain.aggregates import GroupJoinRequest
from membership.domain.value_objects import ChannelId, GroupId, JoinRequestId, UserId
from membership.infrastructure.group_join_request_repository import (
    GroupJoinRequestRepository,
)
from membership.infrastructure.models import GroupJoinRequestModel, UserModel
from membership.infrastructure.observability import JoinRequestRepositoryProbe
from membership.ports.exceptions import DuplicateJoinRequestError
from membership.ports.repositories import IGroupJoinRequestRepository


@pytest.fixture
def mock_probe():
    return create_autospec(JoinRequestRepositoryProbe, instance=True)


@pytest.fixture
def repository(mock_session, mock_probe):
    return GroupJoinRequestRepository(session=mock_session, probe=mock_probe)


class TestGroupJoinRequestRepository:
    def test_implements_protocol(self, repository):
        assert isinstance(repository, IGroupJoinRequestRepository)

    @pytest.mark.asyncio
    async def test_get_for_update_maps_and_locks(self, repository, mock_session):
        channel_id, group_id = ChannelId.generate(), GroupId.generate()
        user = UserModel(
            id=UserId.generate().value, provider_user_id="auth0|u", name="u"
        )
        row = GroupJoinRequestModel(
            id=JoinRequestId.generate().value,
            channel_id=channel_id.value,
            group_id=group_id.value,
            requestor_id=user.id,
            comment="",
            created_at=datetime.now(UTC),
        )
        mock_result = MagicMock()
        mock_result.one_or_none.return_value = (row, user)
        mock_session.execute.return_value = mock_result

        request = await repository.get_for_update(JoinRequestId(value=row.id))

        assert request is not None
        assert request.belongs_to(channel_id, group_id)
        assert request.comment == ""
        sql = str(
            mock_session.execute.call_args[0][0].compile(dialect=postgresql.dialect())
        )
        assert "FOR UPDATE OF group_join_requests" in sql

    @pytest.mark.asyncio
    async def test_create_records_both_scopes(self, repository, mock_session, bob):
        channel_id, group_id = ChannelId.generate(), GroupId.generate()

        request = await repository.create(channel_id, group_id, bob, "ops please")

        added = mock_session.add.call_args[0][0]
        assert isinstance(added, GroupJoinRequestModel)
        assert added.channel_id == channel_id.value
        assert added.group_id == group_id.value
        assert request.belongs_to(channel_id, group_id)

    @pytest.mark.asyncio
    async def test_create_duplicate(self, repository, mock_session, mock_probe, bob):
        group_id = GroupId.generate()
        mock_session.begin_nested.return_value.__aexit__.side_effect = IntegrityError(
            "INSERT INTO group_join_requests",
            {},
            Exception('unique constraint "uq_group_join_requests_requestor"'),
        )

        with pytest.raises(DuplicateJoinRequestError):
            await repository.create(ChannelId.generate(), group_id, bob, "")

        mock_probe.duplicate_join_request.assert_called_once_with(
            group_id.value, bob.id.value
        )

    @pytest.mark.asyncio
    async def test_channel_constraint_name_does_not_match(
        self, repository, mock_session, bob
    ):
        mock_session.begin_nested.return_value.__aexit__.side_effect = IntegrityError(
            "INSERT INTO group_join_requests",
            {},
            Exception('unique constraint "uq_channel_join_requests_requestor"'),
        )

        with pytest.raises(IntegrityError):
            await repository.create(ChannelId.generate(), GroupId.generate(), bob, "")

    @pytest.mark.asyncio
    async def test_delete_reports_group_scope(self, repository, mock_probe, bob):
        request = GroupJoinRequest.create(
            ChannelId.generate(), GroupId.generate(), bob, ""
        )

        await repository.delete(request)

        mock_probe.join_request_deleted.assert_called_once_with(
            request.id.value, request.group_id.value
        )
