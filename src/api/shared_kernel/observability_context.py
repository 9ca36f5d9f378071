"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events, so that events emitted by services and
    repositories during one HTTP request can be correlated.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        channel_id: Channel the operation is scoped to (if applicable).
        group_id: Group the operation is scoped to (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123")
        probe = DefaultChannelJoinRequestServiceProbe().with_context(
            context.with_channel("01HV...")
        )
    """

    request_id: str | None = None
    channel_id: str | None = None
    group_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["correlation_id"] = self.request_id
        if self.channel_id is not None:
            result["context_channel_id"] = self.channel_id
        if self.group_id is not None:
            result["context_group_id"] = self.group_id
        result.update(self.extra)
        return result

    def with_channel(self, channel_id: str) -> ObservationContext:
        """Create a new context with the channel set."""
        return ObservationContext(
            request_id=self.request_id,
            channel_id=channel_id,
            group_id=self.group_id,
            extra=self.extra,
        )

    def with_group(self, channel_id: str, group_id: str) -> ObservationContext:
        """Create a new context scoped to a group inside a channel."""
        return ObservationContext(
            request_id=self.request_id,
            channel_id=channel_id,
            group_id=group_id,
            extra=self.extra,
        )
