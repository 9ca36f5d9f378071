"""Group join request workflow.

Groups live inside a channel. Every operation first checks that the group
exists in the channel the caller named, and any existing group member
may decide on pending requests.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from membership.application.observability import (
    DefaultGroupJoinRequestServiceProbe,
    GroupJoinRequestServiceProbe,
)
from membership.application.services.identity_resolver import IdentityResolver
from membership.application.services.membership_oracle import MembershipOracle
from membership.application.value_objects import Caller
from membership.domain.aggregates import GroupJoinRequest
from membership.domain.value_objects import ChannelId, GroupId, JoinRequestId, UserId
from membership.ports.exceptions import (
    AlreadyMemberError,
    DuplicateJoinRequestError,
    JoinRequestNotFoundError,
    MembershipCreationError,
    NotChannelMemberError,
    NotGroupMemberError,
    NotSenderError,
)
from membership.ports.repositories import (
    IGroupJoinRequestRepository,
    IMembershipRepository,
)


class GroupJoinRequestService:
    """Application service for group join requests."""

    def __init__(
        self,
        session: AsyncSession,
        identity_resolver: IdentityResolver,
        membership_oracle: MembershipOracle,
        membership_repository: IMembershipRepository,
        join_request_repository: IGroupJoinRequestRepository,
        probe: GroupJoinRequestServiceProbe | None = None,
    ):
        self._session = session
        self._identity_resolver = identity_resolver
        self._oracle = membership_oracle
        self._membership_repository = membership_repository
        self._requests = join_request_repository
        self._probe = probe or DefaultGroupJoinRequestServiceProbe()

    def _require_in_group(
        self,
        request: GroupJoinRequest | None,
        channel_id: ChannelId,
        group_id: GroupId,
        request_id: JoinRequestId,
    ) -> GroupJoinRequest:
        if request is None or not request.belongs_to(channel_id, group_id):
            self._probe.join_request_not_found(
                group_id=group_id.value, request_id=request_id.value
            )
            raise JoinRequestNotFoundError(
                f"Join request {request_id} not found in group {group_id}"
            )
        return request

    async def _require_group_member(
        self, group_id: GroupId, caller: Caller, action: str
    ) -> UserId:
        user = await self._identity_resolver.resolve_current_user(caller)
        if not await self._oracle.is_group_member(user.id, group_id):
            self._probe.join_request_access_denied(
                group_id=group_id.value,
                user_id=user.id.value,
                action=action,
                reason="not_group_member",
            )
            raise NotGroupMemberError(
                f"User {user.id} is not a member of group {group_id}"
            )
        return user.id

    async def list_requests(
        self, channel_id: ChannelId, group_id: GroupId, caller: Caller
    ) -> list[GroupJoinRequest]:
        """List pending requests visible to the caller.

        Group members get every request in the group; other callers get
        only the ones they sent.

        Raises:
            GroupNotFoundError: If the group is not in the channel
            UserNotFoundError: If the caller has no user profile
        """
        async with self._session.begin():
            await self._oracle.get_group(channel_id, group_id)
            user = await self._identity_resolver.resolve_current_user(caller)
            is_member = await self._oracle.is_group_member(user.id, group_id)
            if is_member:
                requests = await self._requests.list_all(group_id)
            else:
                requests = await self._requests.list_by_requestor(group_id, user.id)

        self._probe.join_requests_listed(
            group_id=group_id.value,
            user_id=user.id.value,
            count=len(requests),
            as_member=is_member,
        )
        return requests

    async def get_request(
        self,
        channel_id: ChannelId,
        group_id: GroupId,
        request_id: JoinRequestId,
        caller: Caller,
    ) -> GroupJoinRequest:
        """Return one request to a group member or to its sender.

        Raises:
            GroupNotFoundError: If the group is not in the channel
            JoinRequestNotFoundError: If the request is not in the group
            UserNotFoundError: If the caller has no user profile
            NotSenderError: If the caller is neither member nor sender
        """
        async with self._session.begin():
            await self._oracle.get_group(channel_id, group_id)
            request = self._require_in_group(
                await self._requests.get(request_id), channel_id, group_id, request_id
            )
            user = await self._identity_resolver.resolve_current_user(caller)
            if not await self._oracle.is_group_member(user.id, group_id):
                if not request.was_sent_by(user):
                    self._probe.join_request_access_denied(
                        group_id=group_id.value,
                        user_id=user.id.value,
                        action="view",
                        reason="not_member_or_sender",
                    )
                    raise NotSenderError(
                        "Only group members and the sender may view a join request"
                    )

        self._probe.join_request_retrieved(
            group_id=group_id.value,
            request_id=request_id.value,
            user_id=user.id.value,
        )
        return request

    async def create_request(
        self,
        channel_id: ChannelId,
        group_id: GroupId,
        caller: Caller,
        comment: str,
    ) -> GroupJoinRequest:
        """Create a pending request for the caller, or return their existing one.

        Only members of the enclosing channel may ask to join one of its
        groups.

        Raises:
            GroupNotFoundError: If the group is not in the channel
            UserNotFoundError: If the caller has no user profile
            AlreadyMemberError: If the caller already belongs to the group
            NotChannelMemberError: If the caller is not in the channel
        """
        async with self._session.begin():
            await self._oracle.get_group(channel_id, group_id)
            user = await self._identity_resolver.resolve_current_user(caller)

            existing = await self._requests.get_for_requestor(group_id, user.id)
            if existing is not None:
                self._probe.join_request_already_pending(
                    group_id=group_id.value,
                    request_id=existing.id.value,
                    requestor_id=user.id.value,
                )
                return existing

            if await self._oracle.is_group_member(user.id, group_id):
                self._probe.join_request_access_denied(
                    group_id=group_id.value,
                    user_id=user.id.value,
                    action="create",
                    reason="already_member",
                )
                raise AlreadyMemberError(
                    f"User {user.id} is already a member of group {group_id}"
                )

            if not await self._oracle.is_channel_member(user.id, channel_id):
                self._probe.join_request_access_denied(
                    group_id=group_id.value,
                    user_id=user.id.value,
                    action="create",
                    reason="not_channel_member",
                )
                raise NotChannelMemberError(
                    f"User {user.id} is not a member of channel {channel_id}"
                )

            try:
                request = await self._requests.create(
                    channel_id, group_id, user, comment
                )
            except DuplicateJoinRequestError:
                winner = await self._requests.get_for_requestor(group_id, user.id)
                if winner is None:
                    raise
                self._probe.join_request_already_pending(
                    group_id=group_id.value,
                    request_id=winner.id.value,
                    requestor_id=user.id.value,
                )
                return winner

        self._probe.join_request_created(
            group_id=group_id.value,
            request_id=request.id.value,
            requestor_id=user.id.value,
        )
        return request

    async def accept_request(
        self,
        channel_id: ChannelId,
        group_id: GroupId,
        request_id: JoinRequestId,
        caller: Caller,
    ) -> None:
        """Add the requestor to the group and remove the request.

        Raises:
            GroupNotFoundError: If the group is not in the channel
            JoinRequestNotFoundError: If the request is not in the group
            UserNotFoundError: If the caller has no user profile
            NotGroupMemberError: If the caller is not a group member
            MembershipCreationError: If the membership cannot be stored
        """
        async with self._session.begin():
            await self._oracle.get_group(channel_id, group_id)
            request = self._require_in_group(
                await self._requests.get_for_update(request_id),
                channel_id,
                group_id,
                request_id,
            )
            member = await self._require_group_member(group_id, caller, "accept")

            try:
                await self._membership_repository.create_group_membership(
                    request.requestor.id, group_id
                )
            except MembershipCreationError as e:
                self._probe.membership_creation_failed(
                    group_id=group_id.value,
                    request_id=request_id.value,
                    requestor_id=request.requestor.id.value,
                    error=str(e),
                )
                raise

            await self._requests.delete(request)

        self._probe.join_request_accepted(
            group_id=group_id.value,
            request_id=request_id.value,
            requestor_id=request.requestor.id.value,
            member_id=member.value,
        )

    async def reject_request(
        self,
        channel_id: ChannelId,
        group_id: GroupId,
        request_id: JoinRequestId,
        caller: Caller,
    ) -> None:
        """Remove a request without granting membership.

        Raises:
            GroupNotFoundError: If the group is not in the channel
            JoinRequestNotFoundError: If the request is not in the group
            UserNotFoundError: If the caller has no user profile
            NotGroupMemberError: If the caller is not a group member
        """
        async with self._session.begin():
            await self._oracle.get_group(channel_id, group_id)
            request = self._require_in_group(
                await self._requests.get_for_update(request_id),
                channel_id,
                group_id,
                request_id,
            )
            member = await self._require_group_member(group_id, caller, "reject")
            await self._requests.delete(request)

        self._probe.join_request_rejected(
            group_id=group_id.value,
            request_id=request_id.value,
            requestor_id=request.requestor.id.value,
            member_id=member.value,
        )

    async def cancel_request(
        self,
        channel_id: ChannelId,
        group_id: GroupId,
        request_id: JoinRequestId,
        caller: Caller,
    ) -> None:
        """Let the requestor withdraw their own request.

        Raises:
            GroupNotFoundError: If the group is not in the channel
            JoinRequestNotFoundError: If the request is not in the group
            UserNotFoundError: If the caller has no user profile
            NotSenderError: If the caller did not send the request
        """
        async with self._session.begin():
            await self._oracle.get_group(channel_id, group_id)
            request = self._require_in_group(
                await self._requests.get_for_update(request_id),
                channel_id,
                group_id,
                request_id,
            )
            user = await self._identity_resolver.resolve_current_user(caller)
            if not request.was_sent_by(user):
                self._probe.join_request_access_denied(
                    group_id=group_id.value,
                    user_id=user.id.value,
                    action="cancel",
                    reason="not_sender",
                )
                raise NotSenderError("Only the sender may cancel a join request")
            await self._requests.delete(request)

        self._probe.join_request_cancelled(
            group_id=group_id.value,
            request_id=request_id.value,
            requestor_id=user.id.value,
        )
