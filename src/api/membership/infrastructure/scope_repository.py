"""PostgreSQL implementation of IScopeRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from membership.domain.aggregates import Channel, Group
from membership.domain.value_objects import ChannelId, GroupId
from membership.infrastructure.models import ChannelModel, GroupModel
from membership.infrastructure.observability import (
    DefaultScopeRepositoryProbe,
    ScopeRepositoryProbe,
)
from membership.ports.repositories import IScopeRepository


class ScopeRepository(IScopeRepository):
    """Looks up channels and groups by id."""

    def __init__(
        self, session: AsyncSession, probe: ScopeRepositoryProbe | None = None
    ) -> None:
        self._session = session
        self._probe = probe or DefaultScopeRepositoryProbe()

    async def get_channel(self, channel_id: ChannelId) -> Channel | None:
        stmt = select(ChannelModel).where(ChannelModel.id == channel_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.channel_not_found(channel_id.value)
            return None

        return Channel(id=ChannelId(value=model.id), name=model.name)

    async def get_group(self, group_id: GroupId) -> Group | None:
        stmt = select(GroupModel).where(GroupModel.id == group_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.group_not_found(group_id.value)
            return None

        return Group(
            id=GroupId(value=model.id),
            channel_id=ChannelId(value=model.channel_id),
            name=model.name,
        )
