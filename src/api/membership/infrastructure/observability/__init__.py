"""Domain-Oriented Observability for membership infrastructure."""

from membership.infrastructure.observability.repository_probe import (
    DefaultJoinRequestRepositoryProbe,
    DefaultMembershipRepositoryProbe,
    DefaultScopeRepositoryProbe,
    DefaultUserRepositoryProbe,
    JoinRequestRepositoryProbe,
    MembershipRepositoryProbe,
    ScopeRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "DefaultJoinRequestRepositoryProbe",
    "DefaultMembershipRepositoryProbe",
    "DefaultScopeRepositoryProbe",
    "DefaultUserRepositoryProbe",
    "JoinRequestRepositoryProbe",
    "MembershipRepositoryProbe",
    "ScopeRepositoryProbe",
    "UserRepositoryProbe",
]
