"""Pydantic models for channel join request API responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from membership.domain.aggregates import ChannelJoinRequest
from membership.presentation.models import UserResponse


class ChannelJoinRequestResponse(BaseModel):
    """Response model for a pending channel join request."""

    id: str = Field(..., description="Join request ID (ULID format)")
    channel_id: str = Field(..., description="Channel ID (ULID format)")
    requestor: UserResponse = Field(..., description="User who sent the request")
    comment: str = Field(..., description="Comment supplied by the requestor")
    created_at: datetime = Field(..., description="When the request was created")

    @classmethod
    def from_domain(cls, request: ChannelJoinRequest) -> ChannelJoinRequestResponse:
        """Convert domain ChannelJoinRequest aggregate to API response."""
        return cls(
            id=request.id.value,
            channel_id=request.channel_id.value,
            requestor=UserResponse.from_domain(request.requestor),
            comment=request.comment,
            created_at=request.created_at,
        )
