"""PostgreSQL implementation of IGroupJoinRequestRepository."""

from __future__ import annotations

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from membership.domain.aggregates import GroupJoinRequest, User
from membership.domain.value_objects import ChannelId, GroupId, JoinRequestId, UserId
from membership.infrastructure.models import GroupJoinRequestModel, UserModel
from membership.infrastructure.observability import (
    DefaultJoinRequestRepositoryProbe,
    JoinRequestRepositoryProbe,
)
from membership.infrastructure.user_repository import user_from_model
from membership.ports.exceptions import DuplicateJoinRequestError
from membership.ports.repositories import IGroupJoinRequestRepository

_UNIQUE_REQUESTOR = "uq_group_join_requests_requestor"


class GroupJoinRequestRepository(IGroupJoinRequestRepository):
    """PostgreSQL-backed store of pending group join requests."""

    def __init__(
        self,
        session: AsyncSession,
        probe: JoinRequestRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultJoinRequestRepositoryProbe()

    def _select(self) -> Select:
        return select(GroupJoinRequestModel, UserModel).join(
            UserModel, UserModel.id == GroupJoinRequestModel.requestor_id
        )

    @staticmethod
    def _to_domain(
        model: GroupJoinRequestModel, requestor: UserModel
    ) -> GroupJoinRequest:
        return GroupJoinRequest(
            id=JoinRequestId(value=model.id),
            channel_id=ChannelId(value=model.channel_id),
            group_id=GroupId(value=model.group_id),
            requestor=user_from_model(requestor),
            comment=model.comment,
            created_at=model.created_at,
        )

    async def _fetch_all(self, stmt: Select) -> list[GroupJoinRequest]:
        stmt = stmt.order_by(GroupJoinRequestModel.created_at, GroupJoinRequestModel.id)
        result = await self._session.execute(stmt)
        return [self._to_domain(model, user) for model, user in result.all()]

    async def _fetch_one(self, stmt: Select) -> GroupJoinRequest | None:
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        model, user = row
        return self._to_domain(model, user)

    async def list_all(self, group_id: GroupId) -> list[GroupJoinRequest]:
        return await self._fetch_all(
            self._select().where(GroupJoinRequestModel.group_id == group_id.value)
        )

    async def list_by_requestor(
        self, group_id: GroupId, requestor_id: UserId
    ) -> list[GroupJoinRequest]:
        return await self._fetch_all(
            self._select().where(
                GroupJoinRequestModel.group_id == group_id.value,
                GroupJoinRequestModel.requestor_id == requestor_id.value,
            )
        )

    async def get(self, request_id: JoinRequestId) -> GroupJoinRequest | None:
        return await self._fetch_one(
            self._select().where(GroupJoinRequestModel.id == request_id.value)
        )

    async def get_for_update(
        self, request_id: JoinRequestId
    ) -> GroupJoinRequest | None:
        return await self._fetch_one(
            self._select()
            .where(GroupJoinRequestModel.id == request_id.value)
            .with_for_update(of=GroupJoinRequestModel)
        )

    async def get_for_requestor(
        self, group_id: GroupId, requestor_id: UserId
    ) -> GroupJoinRequest | None:
        return await self._fetch_one(
            self._select().where(
                GroupJoinRequestModel.group_id == group_id.value,
                GroupJoinRequestModel.requestor_id == requestor_id.value,
            )
        )

    async def create(
        self,
        channel_id: ChannelId,
        group_id: GroupId,
        requestor: User,
        comment: str,
    ) -> GroupJoinRequest:
        """Insert a new pending request inside a savepoint.

        Raises:
            DuplicateJoinRequestError: If the requestor already has a
                pending request in the group
        """
        request = GroupJoinRequest.create(
            channel_id=channel_id,
            group_id=group_id,
            requestor=requestor,
            comment=comment,
        )
        model = GroupJoinRequestModel(
            id=request.id.value,
            channel_id=channel_id.value,
            group_id=group_id.value,
            requestor_id=requestor.id.value,
            comment=comment,
            created_at=request.created_at,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as e:
            if _UNIQUE_REQUESTOR in str(e):
                self._probe.duplicate_join_request(group_id.value, requestor.id.value)
                raise DuplicateJoinRequestError(
                    f"User {requestor.id} already has a pending request "
                    f"in group {group_id}"
                ) from e
            raise

        self._probe.join_request_saved(request.id.value, group_id.value)
        return request

    async def delete(self, request: GroupJoinRequest) -> None:
        stmt = delete(GroupJoinRequestModel).where(
            GroupJoinRequestModel.id == request.id.value
        )
        await self._session.execute(stmt)
        self._probe.join_request_deleted(request.id.value, request.group_id.value)
