"""PostgreSQL implementation of IUserRepository.

Read-only: profiles are provisioned from the identity provider elsewhere.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from membership.domain.aggregates import User
from membership.domain.value_objects import UserId
from membership.infrastructure.models import UserModel
from membership.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from membership.ports.repositories import IUserRepository


def user_from_model(model: UserModel) -> User:
    """Convert a UserModel row into a User aggregate."""
    return User(
        id=UserId(value=model.id),
        provider_user_id=model.provider_user_id,
        name=model.name,
        nickname=model.nickname,
        email=model.email,
        picture_url=model.picture_url,
        last_updated_at=model.last_updated_at,
    )


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def get_by_provider_id(self, provider_user_id: str) -> User | None:
        """Retrieve the user linked to an identity provider subject.

        Args:
            provider_user_id: The identity provider's subject

        Returns:
            The User aggregate, or None if not found
        """
        stmt = select(UserModel).where(UserModel.provider_user_id == provider_user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(provider_user_id)
            return None

        self._probe.user_retrieved(model.id)
        return user_from_model(model)

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        stmt = select(UserModel).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(user_id.value)
            return None

        self._probe.user_retrieved(user_id.value)
        return user_from_model(model)
