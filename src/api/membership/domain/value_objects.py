"""Value objects for the membership domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Self

from ulid import ULID


@dataclass(frozen=True)
class _UlidIdentifier:
    """Base for ULID-backed identifiers.

    ULIDs sort by creation time, which gives join requests a stable
    insertion order without a separate sequence column.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> Self:
        """Generate a new identifier."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create an identifier from its string form.

        Args:
            value: ULID string

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid {cls.__name__}: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class UserId(_UlidIdentifier):
    """Internal identifier for a User (never the identity provider's id)."""


@dataclass(frozen=True)
class ChannelId(_UlidIdentifier):
    """Identifier for a Channel."""


@dataclass(frozen=True)
class GroupId(_UlidIdentifier):
    """Identifier for a Group nested in a Channel."""


@dataclass(frozen=True)
class JoinRequestId(_UlidIdentifier):
    """Identifier for a channel or group join request."""


class MembershipRole(StrEnum):
    """Role a user holds in a channel.

    Owners accept and reject join requests; members have no moderation
    rights.
    """

    MEMBER = "member"
    OWNER = "owner"
