"""Unit tests for ScopeRepository."""

from unittest.mock import MagicMock, create_autospec

import pytest

from membership.domain.value_objects import ChannelId, GroupId
from membership.infrastructure.models import ChannelModel, GroupModel
from membership.infrastructure.observability import ScopeRepositoryProbe
from membership.infrastructure.scope_repository import ScopeRepository


@pytest.fixture
def mock_probe():
    return create_autospec(ScopeRepositoryProbe, instance=True)


@pytest.fixture
def repository(mock_session, mock_probe):
    return ScopeRepository(session=mock_session, probe=mock_probe)


def _returning(mock_session, model):
    result = MagicMock()
    result.scalar_one_or_none.return_value = model
    mock_session.execute.return_value = result


class TestGetChannel:
    @pytest.mark.asyncio
    async def test_maps_channel(self, repository, mock_session):
        channel_id = ChannelId.generate()
        _returning(mock_session, ChannelModel(id=channel_id.value, name="general"))

        channel = await repository.get_channel(channel_id)

        assert channel is not None
        assert channel.id == channel_id
        assert channel.name == "general"

    @pytest.mark.asyncio
    async def test_missing_channel(self, repository, mock_session, mock_probe):
        channel_id = ChannelId.generate()
        _returning(mock_session, None)

        assert await repository.get_channel(channel_id) is None
        mock_probe.channel_not_found.assert_called_once_with(channel_id.value)


class TestGetGroup:
    @pytest.mark.asyncio
    async def test_maps_group_with_parent_channel(self, repository, mock_session):
        channel_id, group_id = ChannelId.generate(), GroupId.generate()
        _returning(
            mock_session,
            GroupModel(id=group_id.value, channel_id=channel_id.value, name="ops"),
        )

        group = await repository.get_group(group_id)

        assert group is not None
        assert group.belongs_to(channel_id)
        assert group.name == "ops"

    @pytest.mark.asyncio
    async def test_missing_group(self, repository, mock_session, mock_probe):
        group_id = GroupId.generate()
        _returning(mock_session, None)

        assert await repository.get_group(group_id) is None
        mock_probe.group_not_found.assert_called_once_with(group_id.value)
