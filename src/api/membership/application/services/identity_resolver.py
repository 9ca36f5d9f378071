"""Maps an authenticated caller onto a local user profile."""

from __future__ import annotations

from membership.application.value_objects import Caller
from membership.domain.aggregates import User
from membership.ports.exceptions import UserNotFoundError
from membership.ports.repositories import IUserRepository


class IdentityResolver:
    """Resolves the current caller to a User."""

    def __init__(self, user_repository: IUserRepository):
        self._user_repository = user_repository

    async def resolve_current_user(self, caller: Caller) -> User:
        """Look up the profile linked to the caller's provider id.

        Raises:
            UserNotFoundError: If no profile exists for the caller
        """
        user = await self._user_repository.get_by_provider_id(caller.provider_user_id)
        if user is None:
            raise UserNotFoundError(
                f"No user profile for provider id {caller.provider_user_id}"
            )
        return user
