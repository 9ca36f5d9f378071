"""Translation of membership errors into HTTP responses.

Each error kind keeps its own status code and detail; only failures with
no domain meaning collapse into a 500.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from fastapi import HTTPException, status

from membership.ports.exceptions import (
    AlreadyMemberError,
    ChannelNotFoundError,
    ForbiddenError,
    GroupNotFoundError,
    JoinRequestNotFoundError,
    UserNotFoundError,
)

IdT = TypeVar("IdT")

_NOT_FOUND_DETAILS: dict[type[Exception], str] = {
    ChannelNotFoundError: "Channel not found",
    GroupNotFoundError: "Group not found in channel",
    JoinRequestNotFoundError: "Join request not found",
    UserNotFoundError: "User profile not found",
}


def parse_path_id(parser: Callable[[str], IdT], value: str, label: str) -> IdT:
    """Parse a ULID path parameter with an identifier's ``from_string``.

    Raises:
        HTTPException: 400 if the value is not a valid ULID
    """
    try:
        return parser(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} ID format",
        )


def to_http_exception(error: Exception, failure_detail: str) -> HTTPException:
    """Map a service exception to the HTTPException returned to the client.

    Args:
        error: Exception raised by a join request service
        failure_detail: Detail used when the error has no specific mapping

    Returns:
        HTTPException to raise from the route
    """
    for error_type, detail in _NOT_FOUND_DETAILS.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

    if isinstance(error, ForbiddenError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))

    if isinstance(error, AlreadyMemberError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Already a member"
        )

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure_detail
    )
