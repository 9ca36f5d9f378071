"""User aggregate for the membership context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from membership.domain.value_objects import UserId


@dataclass(frozen=True)
class User:
    """A person's local profile, provisioned from the identity provider.

    ``provider_user_id`` is the identity provider's opaque subject and is
    only used to resolve the caller; it is never returned to clients.

    Equality is structural over every field: two snapshots of the same user
    taken before and after a profile update are not equal. Authorization
    checks therefore compare ``id`` (see ``is_same_user``).
    """

    id: UserId
    provider_user_id: str
    name: str
    nickname: str | None = None
    email: str | None = None
    picture_url: str | None = None
    last_updated_at: datetime | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.id})"

    def is_same_user(self, other: User) -> bool:
        """Check whether ``other`` refers to the same person as this user."""
        return self.id == other.id
