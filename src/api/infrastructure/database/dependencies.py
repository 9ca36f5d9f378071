"""Database dependency injection for FastAPI.

Provides one AsyncSession per request. Sessions never auto-commit:
application services own the transaction boundary with
``async with session.begin()``.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

_probe = DefaultConnectionProbe()

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Guards lazy engine creation
_engine_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """Get the database engine (singleton).

    Creates the engine and its sessionmaker on first call using
    double-checked locking.

    Returns:
        Configured async engine
    """
    global _engine, _sessionmaker
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                settings = get_database_settings()
                _engine = create_engine(settings)
                _sessionmaker = async_sessionmaker(
                    _engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.pool_initialized(
                    database=settings.connection_string,
                    max_conn=settings.pool_max_connections,
                )
    return _engine


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for one request (FastAPI dependency).

    Usage:
        @router.post("/channels/{channel_id}/join-requests")
        async def create(session: AsyncSession = Depends(get_write_session)):
            async with session.begin():
                ...

    Yields:
        AsyncSession for database operations
    """
    get_engine()
    assert _sessionmaker is not None

    async with _sessionmaker() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose the engine on application shutdown.

    Also resets the sessionmaker so the engine can be recreated.
    """
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _probe.pool_closed()
        _engine = None
        _sessionmaker = None
