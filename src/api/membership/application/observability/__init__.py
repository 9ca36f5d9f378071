"""Domain-Oriented Observability for the membership application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from membership.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from membership.application.observability.channel_join_request_service_probe import (
    ChannelJoinRequestServiceProbe,
    DefaultChannelJoinRequestServiceProbe,
)
from membership.application.observability.group_join_request_service_probe import (
    DefaultGroupJoinRequestServiceProbe,
    GroupJoinRequestServiceProbe,
)

__all__ = [
    "AuthenticationProbe",
    "DefaultAuthenticationProbe",
    "ChannelJoinRequestServiceProbe",
    "DefaultChannelJoinRequestServiceProbe",
    "GroupJoinRequestServiceProbe",
    "DefaultGroupJoinRequestServiceProbe",
]
