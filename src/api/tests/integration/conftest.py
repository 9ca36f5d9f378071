"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Connection settings
come from the usual COHORT_DB_* environment variables; when the database
cannot be reached the tests are skipped.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import membership.infrastructure.models  # noqa: F401 - registers tables on Base
from infrastructure.database.engines import create_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        COHORT_DB_HOST, COHORT_DB_PORT, etc.
    """
    return DatabaseSettings()


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine against a freshly created schema.

    Tables are created before the test and dropped afterwards.
    """
    engine = create_engine(integration_db_settings)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, DBAPIError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL not reachable: {e}")

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Provide a session factory for tests that need several sessions."""
    return async_sessionmaker(engine, expire_on_commit=False)
