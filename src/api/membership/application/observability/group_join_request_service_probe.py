"""Protocol for group join request service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class GroupJoinRequestServiceProbe(Protocol):
    """Domain probe for group join request workflow operations."""

    def join_requests_listed(
        self, group_id: str, user_id: str, count: int, as_member: bool
    ) -> None:
        """Record that join requests in a group were listed."""
        ...

    def join_request_retrieved(
        self, group_id: str, request_id: str, user_id: str
    ) -> None:
        """Record that a single join request was viewed."""
        ...

    def join_request_not_found(self, group_id: str, request_id: str) -> None:
        """Record that a request id did not resolve inside the group."""
        ...

    def join_request_created(
        self, group_id: str, request_id: str, requestor_id: str
    ) -> None:
        """Record that a new pending join request was created."""
        ...

    def join_request_already_pending(
        self, group_id: str, request_id: str, requestor_id: str
    ) -> None:
        """Record that create returned the caller's existing request."""
        ...

    def join_request_accepted(
        self, group_id: str, request_id: str, requestor_id: str, member_id: str
    ) -> None:
        """Record that a request was accepted by a group member."""
        ...

    def join_request_rejected(
        self, group_id: str, request_id: str, requestor_id: str, member_id: str
    ) -> None:
        """Record that a request was rejected by a group member."""
        ...

    def join_request_cancelled(
        self, group_id: str, request_id: str, requestor_id: str
    ) -> None:
        """Record that the requestor withdrew their request."""
        ...

    def join_request_access_denied(
        self, group_id: str, user_id: str, action: str, reason: str
    ) -> None:
        """Record that an identified caller was refused an action."""
        ...

    def membership_creation_failed(
        self, group_id: str, request_id: str, requestor_id: str, error: str
    ) -> None:
        """Record that accepting a request failed while creating the membership."""
        ...

    def with_context(self, context: ObservationContext) -> GroupJoinRequestServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupJoinRequestServiceProbe:
    """Default implementation of GroupJoinRequestServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultGroupJoinRequestServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupJoinRequestServiceProbe(logger=self._logger, context=context)

    def join_requests_listed(
        self, group_id: str, user_id: str, count: int, as_member: bool
    ) -> None:
        self._logger.debug(
            "group_join_requests_listed",
            group_id=group_id,
            user_id=user_id,
            count=count,
            as_member=as_member,
            **self._get_context_kwargs(),
        )

    def join_request_retrieved(
        self, group_id: str, request_id: str, user_id: str
    ) -> None:
        self._logger.debug(
            "group_join_request_retrieved",
            group_id=group_id,
            request_id=request_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def join_request_not_found(self, group_id: str, request_id: str) -> None:
        self._logger.debug(
            "group_join_request_not_found",
            group_id=group_id,
            request_id=request_id,
            **self._get_context_kwargs(),
        )

    def join_request_created(
        self, group_id: str, request_id: str, requestor_id: str
    ) -> None:
        self._logger.info(
            "group_join_request_created",
            group_id=group_id,
            request_id=request_id,
            requestor_id=requestor_id,
            **self._get_context_kwargs(),
        )

    def join_request_already_pending(
        self, group_id: str, request_id: str, requestor_id: str
    ) -> None:
        self._logger.info(
            "group_join_request_already_pending",
            group_id=group_id,
            request_id=request_id,
            requestor_id=requestor_id,
            **self._get_context_kwargs(),
        )

    def join_request_accepted(
        self, group_id: str, request_id: str, requestor_id: str, member_id: str
    ) -> None:
        self._logger.info(
            "group_join_request_accepted",
            group_id=group_id,
            request_id=request_id,
            requestor_id=requestor_id,
            member_id=member_id,
            **self._get_context_kwargs(),
        )

    def join_request_rejected(
        self, group_id: str, request_id: str, requestor_id: str, member_id: str
    ) -> None:
        self._logger.info(
            "group_join_request_rejected",
            group_id=group_id,
            request_id=request_id,
            requestor_id=requestor_id,
            member_id=member_id,
            **self._get_context_kwargs(),
        )

    def join_request_cancelled(
        self, group_id: str, request_id: str, requestor_id: str
    ) -> None:
        self._logger.info(
            "group_join_request_cancelled",
            group_id=group_id,
            request_id=request_id,
            requestor_id=requestor_id,
            **self._get_context_kwargs(),
        )

    def join_request_access_denied(
        self, group_id: str, user_id: str, action: str, reason: str
    ) -> None:
        self._logger.warning(
            "group_join_request_access_denied",
            group_id=group_id,
            user_id=user_id,
            action=action,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def membership_creation_failed(
        self, group_id: str, request_id: str, requestor_id: str, error: str
    ) -> None:
        self._logger.error(
            "group_membership_creation_failed",
            group_id=group_id,
            request_id=request_id,
            requestor_id=requestor_id,
            error=error,
            **self._get_context_kwargs(),
        )
