"""Unit test fixtures with mocked dependencies."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from membership.domain.aggregates import User
from membership.domain.value_objects import UserId


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def mock_session():
    """Create mock async session with transaction and savepoint support."""
    session = AsyncMock()

    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)

    mock_savepoint = MagicMock()
    mock_savepoint.__aenter__ = AsyncMock(return_value=None)
    mock_savepoint.__aexit__ = AsyncMock(return_value=None)
    session.begin_nested = MagicMock(return_value=mock_savepoint)

    session.add = MagicMock()
    return session


def make_user(name: str = "Alice", provider_user_id: str | None = None) -> User:
    """Build a User with a fresh id."""
    user_id = UserId.generate()
    return User(
        id=user_id,
        provider_user_id=provider_user_id or f"auth0|{user_id.value.lower()}",
        name=name,
    )


@pytest.fixture
def alice() -> User:
    return make_user("Alice")


@pytest.fixture
def bob() -> User:
    return make_user("Bob")
