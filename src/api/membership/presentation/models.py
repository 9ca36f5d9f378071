"""Pydantic models shared by the channel and group join request routes."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from membership.domain.aggregates import User


class CreateJoinRequestRequest(BaseModel):
    """Request model for creating a join request."""

    comment: str = Field(
        ..., description="Message shown to whoever decides on the request"
    )


class UserResponse(BaseModel):
    """Public profile of a requestor.

    The identity provider's user id is deliberately absent.
    """

    id: str = Field(..., description="User ID (ULID format)")
    name: str = Field(..., description="Display name")
    nickname: str | None = Field(default=None, description="Nickname")
    email: str | None = Field(default=None, description="Email address")
    picture_url: str | None = Field(default=None, description="Avatar URL")
    last_updated_at: datetime | None = Field(
        default=None, description="When the profile was last synced"
    )

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User aggregate to API response.

        Args:
            user: User domain aggregate

        Returns:
            UserResponse without the provider id
        """
        return cls(
            id=user.id.value,
            name=user.name,
            nickname=user.nickname,
            email=user.email,
            picture_url=user.picture_url,
            last_updated_at=user.last_updated_at,
        )
