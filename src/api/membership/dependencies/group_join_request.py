from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from membership.application.observability import (
    DefaultGroupJoinRequestServiceProbe,
    GroupJoinRequestServiceProbe,
)
from membership.application.services import (
    GroupJoinRequestService,
    IdentityResolver,
    MembershipOracle,
)
from membership.dependencies.access import (
    get_identity_resolver,
    get_membership_oracle,
    get_membership_repository,
    get_observation_context,
)
from membership.infrastructure.group_join_request_repository import (
    GroupJoinRequestRepository,
)
from membership.infrastructure.membership_repository import MembershipRepository
from shared_kernel.observability_context import ObservationContext


def get_group_join_request_service_probe(
    channel_id: str,
    group_id: str,
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> GroupJoinRequestServiceProbe:
    """Get a GroupJoinRequestServiceProbe bound to the request's group."""
    return DefaultGroupJoinRequestServiceProbe().with_context(
        context.with_group(channel_id, group_id)
    )


def get_group_join_request_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> GroupJoinRequestRepository:
    """Get GroupJoinRequestRepository instance."""
    return GroupJoinRequestRepository(session=session)


def get_group_join_request_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    identity_resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
    membership_oracle: Annotated[MembershipOracle, Depends(get_membership_oracle)],
    membership_repo: Annotated[
        MembershipRepository, Depends(get_membership_repository)
    ],
    request_repo: Annotated[
        GroupJoinRequestRepository, Depends(get_group_join_request_repository)
    ],
    probe: Annotated[
        GroupJoinRequestServiceProbe, Depends(get_group_join_request_service_probe)
    ],
) -> GroupJoinRequestService:
    """Get GroupJoinRequestService instance."""
    return GroupJoinRequestService(
        session=session,
        identity_resolver=identity_resolver,
        membership_oracle=membership_oracle,
        membership_repository=membership_repo,
        join_request_repository=request_repo,
        probe=probe,
    )
