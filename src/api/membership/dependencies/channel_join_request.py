from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from membership.application.observability import (
    ChannelJoinRequestServiceProbe,
    DefaultChannelJoinRequestServiceProbe,
)
from membership.application.services import (
    ChannelJoinRequestService,
    IdentityResolver,
    MembershipOracle,
)
from membership.dependencies.access import (
    get_identity_resolver,
    get_membership_oracle,
    get_membership_repository,
    get_observation_context,
)
from membership.infrastructure.channel_join_request_repository import (
    ChannelJoinRequestRepository,
)
from membership.infrastructure.membership_repository import MembershipRepository
from shared_kernel.observability_context import ObservationContext


def get_channel_join_request_service_probe(
    channel_id: str,
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> ChannelJoinRequestServiceProbe:
    """Get a ChannelJoinRequestServiceProbe bound to the request's channel.

    Args:
        channel_id: Raw channel id from the path
        context: Request-scoped observation context

    Returns:
        DefaultChannelJoinRequestServiceProbe with context bound
    """
    return DefaultChannelJoinRequestServiceProbe().with_context(
        context.with_channel(channel_id)
    )


def get_channel_join_request_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> ChannelJoinRequestRepository:
    """Get ChannelJoinRequestRepository instance."""
    return ChannelJoinRequestRepository(session=session)


def get_channel_join_request_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    identity_resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
    membership_oracle: Annotated[MembershipOracle, Depends(get_membership_oracle)],
    membership_repo: Annotated[
        MembershipRepository, Depends(get_membership_repository)
    ],
    request_repo: Annotated[
        ChannelJoinRequestRepository, Depends(get_channel_join_request_repository)
    ],
    probe: Annotated[
        ChannelJoinRequestServiceProbe,
        Depends(get_channel_join_request_service_probe),
    ],
) -> ChannelJoinRequestService:
    """Get ChannelJoinRequestService instance.

    Args:
        session: Database session for transaction management
        identity_resolver: Resolves the caller to a local user
        membership_oracle: Scope lookup and membership checks
        membership_repo: Membership repository (shares session via dependency caching)
        request_repo: Channel join request repository
        probe: Service probe bound to the request context

    Returns:
        ChannelJoinRequestService instance
    """
    return ChannelJoinRequestService(
        session=session,
        identity_resolver=identity_resolver,
        membership_oracle=membership_oracle,
        membership_repository=membership_repo,
        join_request_repository=request_repo,
        probe=probe,
    )
