"""Domain exceptions for the membership bounded context.

Each kind stays distinct all the way to the HTTP layer: "not found" and
"not allowed" are never folded into one generic failure.
"""


class ScopeNotFoundError(Exception):
    """Raised when the channel or group named by the caller does not exist."""

    pass


class ChannelNotFoundError(ScopeNotFoundError):
    """Raised when a channel id does not resolve to a channel."""

    pass


class GroupNotFoundError(ScopeNotFoundError):
    """Raised when a group does not exist in the channel named by the caller.

    A group that exists but belongs to another channel is reported the same
    way, so group ids cannot be probed across channels.
    """

    pass


class JoinRequestNotFoundError(Exception):
    """Raised when a join request does not exist in the caller's scope.

    Also raised when the request exists under a different channel or group
    than the one in the path, and when a concurrent accept, reject or cancel
    removed it first.
    """

    pass


class UserNotFoundError(Exception):
    """Raised when the authenticated caller has no local user profile."""

    pass


class ForbiddenError(Exception):
    """Raised when an identified caller may not perform the action."""

    pass


class NotChannelOwnerError(ForbiddenError):
    """Raised when a non-owner tries to accept or reject a channel request."""

    pass


class NotChannelMemberError(ForbiddenError):
    """Raised when a user outside a channel asks to join one of its groups."""

    pass


class NotGroupMemberError(ForbiddenError):
    """Raised when a non-member tries to accept or reject a group request."""

    pass


class NotSenderError(ForbiddenError):
    """Raised when someone other than the requestor views or cancels a request.

    Owners and group members moderate requests through accept and reject;
    cancellation belongs to the requestor alone.
    """

    pass


class AlreadyMemberError(Exception):
    """Raised when a member of a scope asks to join it."""

    pass


class MembershipCreationError(Exception):
    """Raised when the membership for an accepted request cannot be stored.

    The surrounding transaction is rolled back, so the request stays pending.
    """

    pass


class DuplicateJoinRequestError(Exception):
    """Raised by a store when a concurrent create already inserted the request.

    Workflows convert this into an idempotent return of the existing request.
    """

    pass
