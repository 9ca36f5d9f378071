"""Domain probes for membership repository operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events from user, scope, membership and join request
persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, lookup: str) -> None:
        """Record that no user matched the lookup key."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class ScopeRepositoryProbe(Protocol):
    """Domain probe for channel and group lookups."""

    def channel_not_found(self, channel_id: str) -> None:
        """Record that a channel was not found."""
        ...

    def group_not_found(self, group_id: str) -> None:
        """Record that a group was not found."""
        ...

    def with_context(self, context: ObservationContext) -> ScopeRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class MembershipRepositoryProbe(Protocol):
    """Domain probe for membership persistence."""

    def channel_membership_created(
        self, channel_id: str, user_id: str, role: str
    ) -> None:
        """Record that a channel membership was stored."""
        ...

    def group_membership_created(self, group_id: str, user_id: str) -> None:
        """Record that a group membership was stored."""
        ...

    def membership_conflict(self, scope_id: str, user_id: str, error: str) -> None:
        """Record that storing a membership violated a constraint."""
        ...

    def with_context(self, context: ObservationContext) -> MembershipRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class JoinRequestRepositoryProbe(Protocol):
    """Domain probe for channel and group join request persistence.

    ``scope_id`` is the channel id for channel requests and the group id
    for group requests.
    """

    def join_request_saved(self, request_id: str, scope_id: str) -> None:
        """Record that a join request was stored."""
        ...

    def join_request_deleted(self, request_id: str, scope_id: str) -> None:
        """Record that a join request was removed."""
        ...

    def duplicate_join_request(self, scope_id: str, requestor_id: str) -> None:
        """Record that an insert lost to an existing request for the pair."""
        ...

    def with_context(self, context: ObservationContext) -> JoinRequestRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class _StructlogProbe:
    """Shared structlog plumbing for the repository probes."""

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

    def with_context(self, context: ObservationContext):
        """Create a new probe of the same type with observation context bound."""
        return type(self)(logger=self._logger, context=context)


class DefaultUserRepositoryProbe(_StructlogProbe):
    """Default implementation of UserRepositoryProbe using structlog."""

    def user_retrieved(self, user_id: str) -> None:
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, lookup: str) -> None:
        self._logger.debug(
            "user_not_found",
            lookup=lookup,
            **self._get_context_kwargs(),
        )


class DefaultScopeRepositoryProbe(_StructlogProbe):
    """Default implementation of ScopeRepositoryProbe using structlog."""

    def channel_not_found(self, channel_id: str) -> None:
        self._logger.debug(
            "channel_not_found",
            channel_id=channel_id,
            **self._get_context_kwargs(),
        )

    def group_not_found(self, group_id: str) -> None:
        self._logger.debug(
            "group_not_found",
            group_id=group_id,
            **self._get_context_kwargs(),
        )


class DefaultMembershipRepositoryProbe(_StructlogProbe):
    """Default implementation of MembershipRepositoryProbe using structlog."""

    def channel_membership_created(
        self, channel_id: str, user_id: str, role: str
    ) -> None:
        self._logger.info(
            "channel_membership_created",
            channel_id=channel_id,
            user_id=user_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def group_membership_created(self, group_id: str, user_id: str) -> None:
        self._logger.info(
            "group_membership_created",
            group_id=group_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def membership_conflict(self, scope_id: str, user_id: str, error: str) -> None:
        self._logger.warning(
            "membership_conflict",
            scope_id=scope_id,
            user_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )


class DefaultJoinRequestRepositoryProbe(_StructlogProbe):
    """Default implementation of JoinRequestRepositoryProbe using structlog."""

    def join_request_saved(self, request_id: str, scope_id: str) -> None:
        self._logger.info(
            "join_request_saved",
            request_id=request_id,
            scope_id=scope_id,
            **self._get_context_kwargs(),
        )

    def join_request_deleted(self, request_id: str, scope_id: str) -> None:
        self._logger.info(
            "join_request_deleted",
            request_id=request_id,
            scope_id=scope_id,
            **self._get_context_kwargs(),
        )

    def duplicate_join_request(self, scope_id: str, requestor_id: str) -> None:
        self._logger.info(
            "duplicate_join_request",
            scope_id=scope_id,
            requestor_id=requestor_id,
            **self._get_context_kwargs(),
        )
