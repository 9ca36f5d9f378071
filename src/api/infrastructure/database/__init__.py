"""Database infrastructure - shared engine, sessions and ORM base."""

from infrastructure.database.dependencies import (
    close_database_connections,
    get_engine,
    get_write_session,
)
from infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
    "close_database_connections",
    "get_engine",
    "get_write_session",
]
