"""Channel join request workflow.

Orchestrates listing, creating, accepting, rejecting and cancelling
requests to join a channel. Every operation runs inside one database
transaction, so the membership insert and the request delete of an
acceptance commit or roll back together.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from membership.application.observability import (
    ChannelJoinRequestServiceProbe,
    DefaultChannelJoinRequestServiceProbe,
)
from membership.application.services.identity_resolver import IdentityResolver
from membership.application.services.membership_oracle import MembershipOracle
from membership.application.value_objects import Caller
from membership.domain.aggregates import ChannelJoinRequest
from membership.domain.value_objects import (
    ChannelId,
    JoinRequestId,
    MembershipRole,
    UserId,
)
from membership.ports.exceptions import (
    AlreadyMemberError,
    DuplicateJoinRequestError,
    JoinRequestNotFoundError,
    MembershipCreationError,
    NotChannelOwnerError,
    NotSenderError,
)
from membership.ports.repositories import (
    IChannelJoinRequestRepository,
    IMembershipRepository,
)


class ChannelJoinRequestService:
    """Application service for channel join requests.

    Channel owners see and decide on every pending request in their
    channel. Anyone else only sees, and may only cancel, their own.
    """

    def __init__(
        self,
        session: AsyncSession,
        identity_resolver: IdentityResolver,
        membership_oracle: MembershipOracle,
        membership_repository: IMembershipRepository,
        join_request_repository: IChannelJoinRequestRepository,
        probe: ChannelJoinRequestServiceProbe | None = None,
    ):
        """Initialize ChannelJoinRequestService with dependencies.

        Args:
            session: Database session for transaction management
            identity_resolver: Resolves the caller to a local user
            membership_oracle: Scope lookup and membership checks
            membership_repository: Creates the membership on acceptance
            join_request_repository: Store of pending channel requests
            probe: Optional domain probe for observability
        """
        self._session = session
        self._identity_resolver = identity_resolver
        self._oracle = membership_oracle
        self._membership_repository = membership_repository
        self._requests = join_request_repository
        self._probe = probe or DefaultChannelJoinRequestServiceProbe()

    def _require_in_channel(
        self,
        request: ChannelJoinRequest | None,
        channel_id: ChannelId,
        request_id: JoinRequestId,
    ) -> ChannelJoinRequest:
        """Return the request if it exists in ``channel_id``.

        A request that lives in another channel is reported as missing.
        """
        if request is None or not request.belongs_to(channel_id):
            self._probe.join_request_not_found(
                channel_id=channel_id.value, request_id=request_id.value
            )
            raise JoinRequestNotFoundError(
                f"Join request {request_id} not found in channel {channel_id}"
            )
        return request

    async def list_requests(
        self, channel_id: ChannelId, caller: Caller
    ) -> list[ChannelJoinRequest]:
        """List pending requests visible to the caller.

        Owners get every request in the channel; other callers get only
        the ones they sent. Both lists are in insertion order.

        Raises:
            ChannelNotFoundError: If the channel does not exist
            UserNotFoundError: If the caller has no user profile
        """
        async with self._session.begin():
            await self._oracle.get_channel(channel_id)
            user = await self._identity_resolver.resolve_current_user(caller)
            is_owner = await self._oracle.is_channel_owner(user.id, channel_id)
            if is_owner:
                requests = await self._requests.list_all(channel_id)
            else:
                requests = await self._requests.list_by_requestor(channel_id, user.id)

        self._probe.join_requests_listed(
            channel_id=channel_id.value,
            user_id=user.id.value,
            count=len(requests),
            as_owner=is_owner,
        )
        return requests

    async def get_request(
        self, channel_id: ChannelId, request_id: JoinRequestId, caller: Caller
    ) -> ChannelJoinRequest:
        """Return one request to a channel owner or to its sender.

        Raises:
            ChannelNotFoundError: If the channel does not exist
            JoinRequestNotFoundError: If the request is not in the channel
            UserNotFoundError: If the caller has no user profile
            NotSenderError: If the caller is neither owner nor sender
        """
        async with self._session.begin():
            await self._oracle.get_channel(channel_id)
            request = self._require_in_channel(
                await self._requests.get(request_id), channel_id, request_id
            )
            user = await self._identity_resolver.resolve_current_user(caller)
            if not await self._oracle.is_channel_owner(user.id, channel_id):
                if not request.was_sent_by(user):
                    self._probe.join_request_access_denied(
                        channel_id=channel_id.value,
                        user_id=user.id.value,
                        action="view",
                        reason="not_owner_or_sender",
                    )
                    raise NotSenderError(
                        "Only channel owners and the sender may view a join request"
                    )

        self._probe.join_request_retrieved(
            channel_id=channel_id.value,
            request_id=request_id.value,
            user_id=user.id.value,
        )
        return request

    async def create_request(
        self, channel_id: ChannelId, caller: Caller, comment: str
    ) -> ChannelJoinRequest:
        """Create a pending request for the caller, or return their existing one.

        Creation is idempotent per (channel, caller): a second call, or a
        call that loses a race to a concurrent one, returns the request
        that is already stored and leaves its comment untouched.

        Raises:
            ChannelNotFoundError: If the channel does not exist
            UserNotFoundError: If the caller has no user profile
            AlreadyMemberError: If the caller already belongs to the channel
        """
        async with self._session.begin():
            await self._oracle.get_channel(channel_id)
            user = await self._identity_resolver.resolve_current_user(caller)

            existing = await self._requests.get_for_requestor(channel_id, user.id)
            if existing is not None:
                self._probe.join_request_already_pending(
                    channel_id=channel_id.value,
                    request_id=existing.id.value,
                    requestor_id=user.id.value,
                )
                return existing

            if await self._oracle.is_channel_member(user.id, channel_id):
                self._probe.join_request_access_denied(
                    channel_id=channel_id.value,
                    user_id=user.id.value,
                    action="create",
                    reason="already_member",
                )
                raise AlreadyMemberError(
                    f"User {user.id} is already a member of channel {channel_id}"
                )

            try:
                request = await self._requests.create(channel_id, user, comment)
            except DuplicateJoinRequestError:
                winner = await self._requests.get_for_requestor(channel_id, user.id)
                if winner is None:
                    raise
                self._probe.join_request_already_pending(
                    channel_id=channel_id.value,
                    request_id=winner.id.value,
                    requestor_id=user.id.value,
                )
                return winner

        self._probe.join_request_created(
            channel_id=channel_id.value,
            request_id=request.id.value,
            requestor_id=user.id.value,
        )
        return request

    async def accept_request(
        self, channel_id: ChannelId, request_id: JoinRequestId, caller: Caller
    ) -> None:
        """Make the requestor a channel member and remove the request.

        The request row stays locked for the rest of the transaction, so a
        concurrent accept, reject or cancel waits and then finds it gone.

        Raises:
            ChannelNotFoundError: If the channel does not exist
            JoinRequestNotFoundError: If the request is not in the channel
            UserNotFoundError: If the caller has no user profile
            NotChannelOwnerError: If the caller does not own the channel
            MembershipCreationError: If the membership cannot be stored
        """
        async with self._session.begin():
            await self._oracle.get_channel(channel_id)
            request = self._require_in_channel(
                await self._requests.get_for_update(request_id),
                channel_id,
                request_id,
            )
            owner = await self._require_owner(channel_id, caller, action="accept")

            try:
                await self._membership_repository.create_channel_membership(
                    request.requestor.id, channel_id, MembershipRole.MEMBER
                )
            except MembershipCreationError as e:
                self._probe.membership_creation_failed(
                    channel_id=channel_id.value,
                    request_id=request_id.value,
                    requestor_id=request.requestor.id.value,
                    error=str(e),
                )
                raise

            await self._requests.delete(request)

        self._probe.join_request_accepted(
            channel_id=channel_id.value,
            request_id=request_id.value,
            requestor_id=request.requestor.id.value,
            owner_id=owner.value,
        )

    async def reject_request(
        self, channel_id: ChannelId, request_id: JoinRequestId, caller: Caller
    ) -> None:
        """Remove a request without granting membership.

        Raises:
            ChannelNotFoundError: If the channel does not exist
            JoinRequestNotFoundError: If the request is not in the channel
            UserNotFoundError: If the caller has no user profile
            NotChannelOwnerError: If the caller does not own the channel
        """
        async with self._session.begin():
            await self._oracle.get_channel(channel_id)
            request = self._require_in_channel(
                await self._requests.get_for_update(request_id),
                channel_id,
                request_id,
            )
            owner = await self._require_owner(channel_id, caller, action="reject")
            await self._requests.delete(request)

        self._probe.join_request_rejected(
            channel_id=channel_id.value,
            request_id=request_id.value,
            requestor_id=request.requestor.id.value,
            owner_id=owner.value,
        )

    async def cancel_request(
        self, channel_id: ChannelId, request_id: JoinRequestId, caller: Caller
    ) -> None:
        """Let the requestor withdraw their own request.

        Owners cannot cancel on a requestor's behalf; they reject instead.

        Raises:
            ChannelNotFoundError: If the channel does not exist
            JoinRequestNotFoundError: If the request is not in the channel
            UserNotFoundError: If the caller has no user profile
            NotSenderError: If the caller did not send the request
        """
        async with self._session.begin():
            await self._oracle.get_channel(channel_id)
            request = self._require_in_channel(
                await self._requests.get_for_update(request_id),
                channel_id,
                request_id,
            )
            user = await self._identity_resolver.resolve_current_user(caller)
            if not request.was_sent_by(user):
                self._probe.join_request_access_denied(
                    channel_id=channel_id.value,
                    user_id=user.id.value,
                    action="cancel",
                    reason="not_sender",
                )
                raise NotSenderError("Only the sender may cancel a join request")
            await self._requests.delete(request)

        self._probe.join_request_cancelled(
            channel_id=channel_id.value,
            request_id=request_id.value,
            requestor_id=user.id.value,
        )

    async def _require_owner(
        self, channel_id: ChannelId, caller: Caller, action: str
    ) -> UserId:
        """Resolve the caller and check they own the channel.

        Returns:
            The owner's UserId
        """
        user = await self._identity_resolver.resolve_current_user(caller)
        if not await self._oracle.is_channel_owner(user.id, channel_id):
            self._probe.join_request_access_denied(
                channel_id=channel_id.value,
                user_id=user.id.value,
                action=action,
                reason="not_owner",
            )
            raise NotChannelOwnerError(
                f"User {user.id} does not own channel {channel_id}"
            )
        return user.id
