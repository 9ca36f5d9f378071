"""Protocol for channel join request service observability.

Defines the interface for domain probes that capture application-level
domain events for the channel join request workflow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ChannelJoinRequestServiceProbe(Protocol):
    """Domain probe for channel join request workflow operations."""

    def join_requests_listed(
        self, channel_id: str, user_id: str, count: int, as_owner: bool
    ) -> None:
        """Record that join requests in a channel were listed."""
        ...

    def join_request_retrieved(
        self, channel_id: str, request_id: str, user_id: str
    ) -> None:
        """Record that a single join request was viewed."""
        ...

    def join_request_not_found(self, channel_id: str, request_id: str) -> None:
        """Record that a request id did not resolve inside the channel."""
        ...

    def join_request_created(
        self, channel_id: str, request_id: str, requestor_id: str
    ) -> None:
        """Record that a new pending join request was created."""
        ...

    def join_request_already_pending(
        self, channel_id: str, request_id: str, requestor_id: str
    ) -> None:
        """Record that create returned the caller's existing request."""
        ...

    def join_request_accepted(
        self, channel_id: str, request_id: str, requestor_id: str, owner_id: str
    ) -> None:
        """Record that a request was accepted and the requestor became a member."""
        ...

    def join_request_rejected(
        self, channel_id: str, request_id: str, requestor_id: str, owner_id: str
    ) -> None:
        """Record that a request was rejected and removed."""
        ...

    def join_request_cancelled(
        self, channel_id: str, request_id: str, requestor_id: str
    ) -> None:
        """Record that the requestor withdrew their request."""
        ...

    def join_request_access_denied(
        self, channel_id: str, user_id: str, action: str, reason: str
    ) -> None:
        """Record that an identified caller was refused an action."""
        ...

    def membership_creation_failed(
        self, channel_id: str, request_id: str, requestor_id: str, error: str
    ) -> None:
        """Record that accepting a request failed while creating the membership."""
        ...

    def with_context(
        self, context: ObservationContext
    ) -> ChannelJoinRequestServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultChannelJoinRequestServiceProbe:
    """Default implementation of ChannelJoinRequestServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultChannelJoinRequestServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultChannelJoinRequestServiceProbe(
            logger=self._logger, context=context
        )

    def join_requests_listed(
        self, channel_id: str, user_id: str, count: int, as_owner: bool
    ) -> None:
        self._logger.debug(
            "channel_join_requests_listed",
            channel_id=channel_id,
            user_id=user_id,
            count=count,
            as_owner=as_owner,
            **self._get_context_kwargs(),
        )

    def join_request_retrieved(
        self, channel_id: str, request_id: str, user_id: str
    ) -> None:
        self._logger.debug(
            "channel_join_request_retrieved",
            channel_id=channel_id,
            request_id=request_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def join_request_not_found(self, channel_id: str, request_id: str) -> None:
        self._logger.debug(
            "channel_join_request_not_found",
            channel_id=channel_id,
            request_id=request_id,
            **self._get_context_kwargs(),
        )

    def join_request_created(
        self, channel_id: str, request_id: str, requestor_id: str
    ) -> None:
        self._logger.info(
            "channel_join_request_created",
            channel_id=channel_id,
            request_id=request_id,
            requestor_id=requestor_id,
            **self._get_context_kwargs(),
        )

    def join_request_already_pending(
        self, channel_id: str, request_id: str, requestor_id: str
    ) -> None:
        self._logger.info(
            "channel_join_request_already_pending",
            channel_id=channel_id,
            request_id=request_id,
            requestor_id=requestor_id,
            **self._get_context_kwargs(),
        )

    def join_request_accepted(
        self, channel_id: str, request_id: str, requestor_id: str, owner_id: str
    ) -> None:
        self._logger.info(
            "channel_join_request_accepted",
            channel_id=channel_id,
            request_id=request_id,
            requestor_id=requestor_id,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def join_request_rejected(
        self, channel_id: str, request_id: str, requestor_id: str, owner_id: str
    ) -> None:
        self._logger.info(
            "channel_join_request_rejected",
            channel_id=channel_id,
            request_id=request_id,
            requestor_id=requestor_id,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def join_request_cancelled(
        self, channel_id: str, request_id: str, requestor_id: str
    ) -> None:
        self._logger.info(
            "channel_join_request_cancelled",
            channel_id=channel_id,
            request_id=request_id,
            requestor_id=requestor_id,
            **self._get_context_kwargs(),
        )

    def join_request_access_denied(
        self, channel_id: str, user_id: str, action: str, reason: str
    ) -> None:
        self._logger.warning(
            "channel_join_request_access_denied",
            channel_id=channel_id,
            user_id=user_id,
            action=action,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def membership_creation_failed(
        self, channel_id: str, request_id: str, requestor_id: str, error: str
    ) -> None:
        self._logger.error(
            "channel_membership_creation_failed",
            channel_id=channel_id,
            request_id=request_id,
            requestor_id=requestor_id,
            error=error,
            **self._get_context_kwargs(),
        )
