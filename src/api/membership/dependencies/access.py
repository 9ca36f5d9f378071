"""Repository, resolver and oracle providers shared by both workflows.

Every provider depends on get_write_session, which FastAPI caches per
request, so all of them share the service's session and transaction.
"""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from membership.application.services import IdentityResolver, MembershipOracle
from membership.infrastructure.membership_repository import MembershipRepository
from membership.infrastructure.scope_repository import ScopeRepository
from membership.infrastructure.user_repository import UserRepository
from shared_kernel.observability_context import ObservationContext


def get_observation_context(
    x_request_id: Annotated[str | None, Header(alias="X-Request-ID")] = None,
) -> ObservationContext:
    """Build the request-scoped observation context."""
    return ObservationContext(request_id=x_request_id)


def get_membership_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> MembershipRepository:
    """Get MembershipRepository instance.

    Args:
        session: Async database session

    Returns:
        MembershipRepository instance
    """
    return MembershipRepository(session=session)


def get_identity_resolver(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> IdentityResolver:
    """Get IdentityResolver backed by the user repository."""
    return IdentityResolver(user_repository=UserRepository(session=session))


def get_membership_oracle(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    membership_repo: Annotated[
        MembershipRepository, Depends(get_membership_repository)
    ],
) -> MembershipOracle:
    """Get MembershipOracle backed by the scope and membership repositories."""
    return MembershipOracle(
        scope_repository=ScopeRepository(session=session),
        membership_repository=membership_repo,
    )
