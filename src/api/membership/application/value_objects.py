"""Application-layer value objects for the membership bounded context."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Caller:
    """The authenticated principal behind a request.

    Carries only the identity provider's subject. Whether that subject has
    a local user profile is decided by IdentityResolver, not at
    authentication time.
    """

    provider_user_id: str
