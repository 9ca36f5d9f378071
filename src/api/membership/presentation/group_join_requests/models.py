"""Pydantic models for group join request API responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from membership.domain.aggregates import GroupJoinRequest
from membership.presentation.models import UserResponse


class GroupJoinRequestResponse(BaseModel):
    """Response model for a pending group join request."""

    id: str = Field(..., description="Join request ID (ULID format)")
    channel_id: str = Field(..., description="Channel ID (ULID format)")
    group_id: str = Field(..., description="Group ID (ULID format)")
    requestor: UserResponse = Field(..., description="User who sent the request")
    comment: str = Field(..., description="Comment supplied by the requestor")
    created_at: datetime = Field(..., description="When the request was created")

    @classmethod
    def from_domain(cls, request: GroupJoinRequest) -> GroupJoinRequestResponse:
        """Convert domain GroupJoinRequest aggregate to API response."""
        return cls(
            id=request.id.value,
            channel_id=request.channel_id.value,
            group_id=request.group_id.value,
            requestor=UserResponse.from_domain(request.requestor),
            comment=request.comment,
            created_at=request.created_at,
        )
