"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_write_session,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultConnectionProbe, DefaultStartupProbe
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from membership.presentation import router as membership_router


@asynccontextmanager
async def cohort_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - structlog configuration
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    probe = DefaultStartupProbe()
    probe.application_started(app_name=settings.app_name, version=__version__)

    yield

    await close_database_connections()
    probe.application_stopped(app_name=settings.app_name)


app = FastAPI(
    title="Cohort API",
    description="Join request workflows for channels and their groups",
    version=__version__,
    lifespan=cohort_lifespan,
)

app.include_router(membership_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> dict:
    """Check database connection health."""
    try:
        await session.execute(text("SELECT 1"))
        return {"status": "ok", "connected": True}
    except Exception as e:
        DefaultConnectionProbe().health_check_failed(e)
        return {
            "status": "error",
            "connected": False,
            "error": str(e),
        }
