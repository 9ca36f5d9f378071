"""PostgreSQL implementation of IChannelJoinRequestRepository.

Requests are always loaded together with their requestor's profile, so
the aggregate carries a full User snapshot.
"""

from __future__ import annotations

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from membership.domain.aggregates import ChannelJoinRequest, User
from membership.domain.value_objects import ChannelId, JoinRequestId, UserId
from membership.infrastructure.models import ChannelJoinRequestModel, UserModel
from membership.infrastructure.observability import (
    DefaultJoinRequestRepositoryProbe,
    JoinRequestRepositoryProbe,
)
from membership.infrastructure.user_repository import user_from_model
from membership.ports.exceptions import DuplicateJoinRequestError
from membership.ports.repositories import IChannelJoinRequestRepository

_UNIQUE_REQUESTOR = "uq_channel_join_requests_requestor"


class ChannelJoinRequestRepository(IChannelJoinRequestRepository):
    """PostgreSQL-backed store of pending channel join requests."""

    def __init__(
        self,
        session: AsyncSession,
        probe: JoinRequestRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultJoinRequestRepositoryProbe()

    def _select(self) -> Select:
        return select(ChannelJoinRequestModel, UserModel).join(
            UserModel, UserModel.id == ChannelJoinRequestModel.requestor_id
        )

    @staticmethod
    def _to_domain(
        model: ChannelJoinRequestModel, requestor: UserModel
    ) -> ChannelJoinRequest:
        return ChannelJoinRequest(
            id=JoinRequestId(value=model.id),
            channel_id=ChannelId(value=model.channel_id),
            requestor=user_from_model(requestor),
            comment=model.comment,
            created_at=model.created_at,
        )

    async def _fetch_all(self, stmt: Select) -> list[ChannelJoinRequest]:
        stmt = stmt.order_by(
            ChannelJoinRequestModel.created_at, ChannelJoinRequestModel.id
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model, user) for model, user in result.all()]

    async def _fetch_one(self, stmt: Select) -> ChannelJoinRequest | None:
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        model, user = row
        return self._to_domain(model, user)

    async def list_all(self, channel_id: ChannelId) -> list[ChannelJoinRequest]:
        return await self._fetch_all(
            self._select().where(ChannelJoinRequestModel.channel_id == channel_id.value)
        )

    async def list_by_requestor(
        self, channel_id: ChannelId, requestor_id: UserId
    ) -> list[ChannelJoinRequest]:
        return await self._fetch_all(
            self._select().where(
                ChannelJoinRequestModel.channel_id == channel_id.value,
                ChannelJoinRequestModel.requestor_id == requestor_id.value,
            )
        )

    async def get(self, request_id: JoinRequestId) -> ChannelJoinRequest | None:
        return await self._fetch_one(
            self._select().where(ChannelJoinRequestModel.id == request_id.value)
        )

    async def get_for_update(
        self, request_id: JoinRequestId
    ) -> ChannelJoinRequest | None:
        """Retrieve a request and hold a row lock on it until commit.

        Only the request row is locked; the requestor's profile is read
        without a lock.
        """
        return await self._fetch_one(
            self._select()
            .where(ChannelJoinRequestModel.id == request_id.value)
            .with_for_update(of=ChannelJoinRequestModel)
        )

    async def get_for_requestor(
        self, channel_id: ChannelId, requestor_id: UserId
    ) -> ChannelJoinRequest | None:
        return await self._fetch_one(
            self._select().where(
                ChannelJoinRequestModel.channel_id == channel_id.value,
                ChannelJoinRequestModel.requestor_id == requestor_id.value,
            )
        )

    async def create(
        self, channel_id: ChannelId, requestor: User, comment: str
    ) -> ChannelJoinRequest:
        """Insert a new pending request inside a savepoint.

        Raises:
            DuplicateJoinRequestError: If the requestor already has a
                pending request in the channel
        """
        request = ChannelJoinRequest.create(
            channel_id=channel_id, requestor=requestor, comment=comment
        )
        model = ChannelJoinRequestModel(
            id=request.id.value,
            channel_id=channel_id.value,
            requestor_id=requestor.id.value,
            comment=comment,
            created_at=request.created_at,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as e:
            if _UNIQUE_REQUESTOR in str(e):
                self._probe.duplicate_join_request(
                    channel_id.value, requestor.id.value
                )
                raise DuplicateJoinRequestError(
                    f"User {requestor.id} already has a pending request "
                    f"in channel {channel_id}"
                ) from e
            raise

        self._probe.join_request_saved(request.id.value, channel_id.value)
        return request

    async def delete(self, request: ChannelJoinRequest) -> None:
        stmt = delete(ChannelJoinRequestModel).where(
            ChannelJoinRequestModel.id == request.id.value
        )
        await self._session.execute(stmt)
        self._probe.join_request_deleted(request.id.value, request.channel_id.value)
